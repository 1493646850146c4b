import threading

import pytest

from yolo_prep.core.fsops import atomic_write_bytes, copy_file
from yolo_prep.core.progress import CancelToken, Progress


def test_fraction_of_empty_batch_is_complete():
    assert Progress(total=0).fraction == 1.0


def test_step_reports_monotonic_values_across_threads():
    progress = Progress(total=200)
    seen = []

    def worker():
        for _ in range(50):
            progress.step(callback=lambda p: seen.append(p.value))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert seen == list(range(1, 201))
    assert progress.fraction == 1.0


def test_cancel_token():
    token = CancelToken()
    assert not token.is_cancelled()
    token.cancel()
    assert token.is_cancelled()


def test_copy_file_creates_parent_and_rejects_directories(tmp_path):
    src = tmp_path / "a.bin"
    src.write_bytes(b"\x00\x01")
    copy_file(src, tmp_path / "out" / "a.bin")
    assert (tmp_path / "out" / "a.bin").read_bytes() == b"\x00\x01"

    with pytest.raises(OSError):
        copy_file(tmp_path / "out", tmp_path / "other" / "x")


def test_atomic_write_leaves_no_temp_file(tmp_path):
    dst = tmp_path / "images" / "a.jpg"
    atomic_write_bytes(dst, b"jpeg")
    assert dst.read_bytes() == b"jpeg"
    assert list(dst.parent.iterdir()) == [dst]
