import gzip
import io
import sys

import pytest

from qtnmsim.process_stream import GzipStream, ProcessStream


def _python(code):
    return ProcessStream(sys.executable, ["-c", code])


def test_reads_program_output():
    with _python("import sys; sys.stdout.write('hello\\n')") as stream:
        data = stream.readall()
    assert data == b"hello\n"


def test_stderr_is_merged_into_stream():
    code = "import sys; sys.stderr.write('oops'); sys.stderr.flush()"
    with _python(code) as stream:
        data = stream.readall()
    assert data == b"oops"


def test_arguments_are_passed():
    code = "import sys; sys.stdout.write(','.join(sys.argv[1:]))"
    with ProcessStream(sys.executable, ["-c", code, "a", "b c"]) as stream:
        data = stream.readall()
    assert data == b"a,b c"


def test_large_output_arrives_whole():
    code = "import sys; sys.stdout.write('x' * 100000)"
    with _python(code) as stream:
        data = stream.readall()
    assert len(data) == 100000
    assert set(data) == {ord("x")}


def test_buffered_line_reading():
    code = "print('one'); print('two'); print('three')"
    with io.BufferedReader(_python(code)) as reader:
        lines = [line.strip() for line in reader]
    assert lines == [b"one", b"two", b"three"]


def test_readinto_returns_zero_at_end():
    with _python("pass") as stream:
        buffer = bytearray(16)
        assert stream.readinto(buffer) == 0


def test_read_after_close_raises():
    stream = _python("print('x')")
    stream.close()
    assert stream.closed
    with pytest.raises(ValueError):
        stream.readinto(bytearray(4))


def test_close_reaps_process():
    stream = _python("import sys; sys.exit(3)")
    stream.readall()
    stream.close()
    assert stream.returncode == 3


def test_missing_program_raises():
    with pytest.raises(FileNotFoundError):
        ProcessStream("definitely-not-a-real-program-name-xyz", [])


def test_gzip_stream_decompresses(tmp_path):
    payload = b"line one\nline two\n" * 50
    path = tmp_path / "data.gz"
    with gzip.open(path, "wb") as handle:
        handle.write(payload)
    with GzipStream(str(path)) as stream:
        data = stream.readall()
    assert data == payload