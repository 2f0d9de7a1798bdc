import io
import os
import random
import time

import pytest

import huffman_service as hs
from huffman_core import PSEUDO_EOF, HuffmanLogic
from huffman_errors import MalformedHeaderError, SourceReadError, TruncatedStreamError


def _get_service(scramble=True):
	return hs.HuffmanService(scramble=scramble)


def test_roundtrip_random_10kb():
	svc = _get_service()

	data = bytes(random.getrandbits(8) for _ in range(10 * 1024))
	compressed = svc.compress(data)
	out = svc.decompress(compressed)
	assert out == data


def test_roundtrip_all_bytes_once():
	svc = _get_service()

	data = bytes(range(256))
	compressed = svc.compress(data)
	out = svc.decompress(compressed)
	assert out == data


def test_empty_input():
	svc = _get_service()
	data = b""
	compressed = svc.compress(data)
	# header with no entries, then the one-bit sentinel code padded to a byte
	assert compressed == b"0 \x00"
	assert svc.decompress(compressed) == data


def test_single_byte_input():
	svc = _get_service()
	compressed = svc.compress(b"a")
	# 'a' scrambles to 158; body is 'a' -> 0, EOF -> 1, padded
	assert compressed == b"1 " + bytes([158]) + b"1 " + bytes([0b01000000])
	assert svc.decompress(compressed) == b"a"


def test_single_byte_repeated_small():
	svc = _get_service()

	data = b'A' * (1024 * 10)
	compressed = svc.compress(data)
	out = svc.decompress(compressed)
	assert out == data
	assert len(compressed) < len(data) // 4


def test_small_inputs():
	svc = _get_service()

	for n in (1, 2, 3):
		data = bytes(random.getrandbits(8) for _ in range(n))
		compressed = svc.compress(data)
		out = svc.decompress(compressed)
		assert out == data


def test_concrete_scenario_roundtrip():
	svc = _get_service()
	data = b"AAAAAAAABBBCCD"
	compressed = svc.compress(data)
	assert svc.decompress(compressed) == data


def test_roundtrip_without_scrambling():
	svc = _get_service(scramble=False)
	data = b"0123 4567 89  " * 20
	compressed = svc.compress(data)
	assert compressed.startswith(b"11 ")
	assert svc.decompress(compressed) == data


def test_scrambled_and_plain_headers_differ():
	data = b"hello world"
	assert _get_service().compress(data) != _get_service(scramble=False).compress(data)


def test_truncated_stream_behavior():
	svc = _get_service()

	data = b'This is a test' * 100
	compressed = svc.compress(data)
	truncated = compressed[:-3]
	with pytest.raises(TruncatedStreamError):
		svc.decompress(truncated)


@pytest.mark.parametrize("data", [b"", b"a", b"AAAAAAAABBBCCD", bytes(range(256))])
def test_truncated_by_one_byte(data):
	svc = _get_service()
	compressed = svc.compress(data)
	with pytest.raises(TruncatedStreamError):
		svc.decompress(compressed[:-1])


def test_trailing_padding_is_ignored():
	svc = _get_service()
	data = b"abcabcabd"
	compressed = svc.compress(data)
	assert svc.decompress(compressed + b"\xff\xff") == data


def test_corrupted_header_behavior():
	svc = _get_service()

	data = b'Hello World' * 50
	compressed = bytearray(svc.compress(data))
	# flip the bits of the leading count digit
	compressed[0] ^= 0xFF
	with pytest.raises(MalformedHeaderError):
		svc.decompress(bytes(compressed))


def test_decompress_releases_tree_on_truncation(monkeypatch):
	svc = _get_service()
	roots = []
	real_build_tree = HuffmanLogic.build_tree

	def spy(self, frequencies):
		root = real_build_tree(self, frequencies)
		roots.append(root)
		return root

	monkeypatch.setattr(HuffmanLogic, "build_tree", spy)
	compressed = svc.compress(b"some data to compress")
	with pytest.raises(TruncatedStreamError):
		svc.decompress(compressed[:-1])
	assert len(roots) == 2
	assert all(r.left is None and r.right is None for r in roots)


def test_compress_stream_needs_rewindable_source():
	class NoRewind(io.BytesIO):
		def seek(self, *args):
			raise OSError("not seekable")

	with pytest.raises(SourceReadError):
		_get_service().compress_stream(NoRewind(b"abc"), io.BytesIO())


def test_encode_stream_rejects_unknown_byte():
	codes = {ord('a'): (0, 1), PSEUDO_EOF: (1, 1)}
	with pytest.raises(SourceReadError):
		hs.encode_stream(io.BytesIO(b"ab"), codes, hs.BitWriter(io.BytesIO()))


def test_decode_stream_flushes_in_chunks():
	svc = _get_service()
	data = bytes(random.getrandbits(8) for _ in range(5000))
	compressed = io.BytesIO(svc.compress(data))
	freqs = svc.read_frequencies(compressed)
	logic = HuffmanLogic()
	with logic.encoding_tree(freqs) as tree:
		table = logic.generate_decode_table(tree)
	out = io.BytesIO()
	size = hs.decode_stream(hs.BitReader(compressed), table, out, chunk_size=100)
	assert size == len(data)
	assert out.getvalue() == data


def test_file_roundtrip(tmp_path):
	svc = _get_service()
	src = tmp_path / "input.txt"
	packed = tmp_path / "input.txt.huf"
	restored = tmp_path / "restored.txt"
	src.write_bytes(b"log line 1\nlog line 2\n" * 200)

	size = svc.compress_file(str(src), str(packed))
	assert size == os.path.getsize(packed)
	svc.decompress_file(str(packed), str(restored))
	assert restored.read_bytes() == src.read_bytes()


def test_failed_decompress_removes_output(tmp_path):
	svc = _get_service()
	packed = tmp_path / "bad.huf"
	packed.write_bytes(svc.compress(b"hello hello")[:-1])
	out = tmp_path / "out.txt"
	with pytest.raises(TruncatedStreamError):
		svc.decompress_file(str(packed), str(out))
	assert not out.exists()


def test_inspect_reports_code_lengths():
	report = _get_service().inspect(b"AAAAAAAABBBCCD")
	assert report.lengths[ord('A')] == 1
	assert report.lengths[PSEUDO_EOF] == 4
	# 8*1 + 3*2 + 2*3 + 1*4 + 1*4
	assert report.body_bits == 28
	assert len(_get_service().compress(b"AAAAAAAABBBCCD")) == len(b"4 ") + 4 + len(b"8 3 2 1 ") + 4


@pytest.mark.timeout(120)
def test_performance_1mb_baseline():
	svc = _get_service()
	data = bytes(random.getrandbits(8) for _ in range(1024 * 1024))
	t0 = time.time()
	compressed = svc.compress(data)
	dur = time.time() - t0
	assert dur > 0
	assert svc.decompress(compressed) == data
	print(f"Compression time for 1MB: {dur:.4f}s")


def test_service_initializes_logic_attribute():
	svc = _get_service()
	assert hasattr(svc, 'logic')
	assert svc.logic is not None


def test_compress_empty_idempotent():
	svc = _get_service()
	a = svc.compress(b"")
	b = svc.compress(b"")
	assert a == b


def test_compress_stream_starts_at_current_position():
	svc = _get_service()
	src = io.BytesIO(b"HEADERaaaab")
	src.seek(6)
	out = io.BytesIO()
	svc.compress_stream(src, out)
	assert svc.decompress(out.getvalue()) == b"aaaab"
	assert out.getvalue() == svc.compress(b"aaaab")


def test_compress_stream_untellable_source():
	class NoTell(io.BytesIO):
		def tell(self):
			raise OSError("not seekable")

	with pytest.raises(SourceReadError):
		_get_service().compress_stream(NoTell(b"abc"), io.BytesIO())


def test_failed_write_removes_output(tmp_path, monkeypatch):
	svc = _get_service()
	src = tmp_path / "input.txt"
	src.write_bytes(b"abcdef" * 100)
	out = tmp_path / "input.txt.huf"

	def disk_full(source, codes, writer, chunk_size=None):
		writer.write_code(codes[ord('a')])
		writer.flush()
		raise OSError(28, "No space left on device")

	monkeypatch.setattr(hs, "encode_stream", disk_full)
	with pytest.raises(OSError):
		svc.compress_file(str(src), str(out))
	assert not out.exists()
