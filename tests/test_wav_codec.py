import struct
import unittest

import numpy as np

from click_synth import generate_click_samples
from wav_codec import HEADER_SIZE, decode_wav, encode_wav


class TestWavCodec(unittest.TestCase):
    def test_header_layout(self):
        samples = np.array([0, 1, -1, 32767, -32768], dtype=np.int16)
        data = encode_wav(samples, 44100)

        self.assertEqual(len(data), HEADER_SIZE + 2 * len(samples))
        self.assertEqual(HEADER_SIZE, 44)
        self.assertEqual(data[0:4], b"RIFF")
        self.assertEqual(struct.unpack("<I", data[4:8])[0], len(data) - 8)
        self.assertEqual(data[8:12], b"WAVE")
        self.assertEqual(data[12:16], b"fmt ")

        chunk_size, fmt, channels, rate, byte_rate, block_align, bits = struct.unpack(
            "<IHHIIHH", data[16:36]
        )
        self.assertEqual(chunk_size, 16)
        self.assertEqual(fmt, 1)
        self.assertEqual(channels, 1)
        self.assertEqual(rate, 44100)
        self.assertEqual(bits, 16)
        self.assertEqual(byte_rate, rate * channels * bits // 8)
        self.assertEqual(block_align, channels * bits // 8)

        self.assertEqual(data[36:40], b"data")
        self.assertEqual(struct.unpack("<I", data[40:44])[0], 2 * len(samples))

    def test_samples_are_little_endian(self):
        data = encode_wav(np.array([0x0102, -2], dtype=np.int16), 8000)
        self.assertEqual(data[44:46], b"\x02\x01")
        self.assertEqual(data[46:48], b"\xfe\xff")

    def test_decode_returns_original_samples(self):
        samples = generate_click_samples(1000.0)
        decoded, rate = decode_wav(encode_wav(samples, 44100))
        self.assertEqual(rate, 44100)
        np.testing.assert_array_equal(decoded, samples)

    def test_empty_sample_list(self):
        data = encode_wav([], 22050)
        self.assertEqual(len(data), HEADER_SIZE)
        decoded, rate = decode_wav(data)
        self.assertEqual(len(decoded), 0)
        self.assertEqual(rate, 22050)

    def test_decode_skips_unknown_chunk(self):
        data = encode_wav(np.array([5, 6], dtype=np.int16), 44100)
        extra = b"LIST" + struct.pack("<I", 3) + b"abc" + b"\x00"
        patched = data[:36] + extra + data[36:]
        decoded, _ = decode_wav(patched)
        self.assertEqual(decoded.tolist(), [5, 6])

    def test_decode_rejects_garbage(self):
        with self.assertRaises(ValueError):
            decode_wav(b"not audio at all")

    def test_decode_rejects_truncated_data(self):
        data = encode_wav(np.arange(10, dtype=np.int16), 44100)
        with self.assertRaises(ValueError):
            decode_wav(data[:-4])

    def test_decode_rejects_non_pcm(self):
        data = bytearray(encode_wav(np.arange(4, dtype=np.int16), 44100))
        struct.pack_into("<H", data, 20, 3)
        with self.assertRaises(ValueError):
            decode_wav(bytes(data))


if __name__ == "__main__":
    unittest.main()
