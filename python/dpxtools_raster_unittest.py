#!/usr/bin/env python3

"""dpxtools_raster_unittest.py: dpxtools_raster unittest.

# runme
# $ ./dpxtools_raster_unittest.py
"""

import io
import numpy as np
import sys

import dpxtools_common
import dpxtools_decoder
import dpxtools_header
import dpxtools_raster
import dpxtools_unittest

build_dpx_buffer = dpxtools_unittest.build_dpx_buffer
pack_words = dpxtools_unittest.pack_words
pack_10bit_word = dpxtools_unittest.pack_10bit_word


decodeTestCases = [
    {
        "name": "rgb8-2x1",
        "buffer": build_dpx_buffer(2, 1, 50, 8, data=bytes([10, 20, 30, 40, 50, 60])),
        "rgba": [
            [[10, 20, 30, 255], [40, 50, 60, 255]],
        ],
    },
    {
        "name": "rgb8-2x2-le",
        "buffer": build_dpx_buffer(
            2, 2, 50, 8, data=bytes(range(1, 13)), little_endian=True
        ),
        "rgba": [
            [[1, 2, 3, 255], [4, 5, 6, 255]],
            [[7, 8, 9, 255], [10, 11, 12, 255]],
        ],
    },
    {
        # alpha channel is never read
        "name": "rgba8",
        "buffer": build_dpx_buffer(2, 1, 51, 8, data=bytes([1, 2, 3, 4, 5, 6, 7, 8])),
        "rgba": [
            [[1, 2, 3, 255], [5, 6, 7, 255]],
        ],
    },
    {
        # channels 1 and 2 of a 1-component layout overlap the next pixels
        "name": "luma8-padded",
        "buffer": build_dpx_buffer(3, 1, 5, 8, data=bytes([7, 8, 9, 10, 11])),
        "rgba": [
            [[7, 8, 9, 255], [8, 9, 10, 255], [9, 10, 11, 255]],
        ],
    },
    {
        "name": "rgb16-le",
        "buffer": build_dpx_buffer(
            1,
            2,
            50,
            16,
            data=pack_words(
                [0x4000, 0xFFFF, 0x0000, 0x1234, 0x5678, 0x9ABC],
                16,
                little_endian=True,
            ),
            little_endian=True,
        ),
        "rgba": [
            [[0x40, 0xFF, 0x00, 255]],
            [[0x12, 0x56, 0x9A, 255]],
        ],
    },
    {
        "name": "rgb10-be",
        "buffer": build_dpx_buffer(
            2,
            1,
            50,
            10,
            packing=1,
            data=pack_words(
                [pack_10bit_word(1023, 0, 512), pack_10bit_word(4, 8, 12)], 32
            ),
        ),
        "rgba": [
            [[255, 0, 128, 255], [1, 2, 3, 255]],
        ],
    },
    {
        "name": "rgba10-be",
        "buffer": build_dpx_buffer(
            2,
            1,
            51,
            10,
            packing=1,
            data=pack_words(
                [
                    pack_10bit_word(100, 200, 300),
                    pack_10bit_word(400, 500, 600),
                    pack_10bit_word(700, 800, 0),
                ],
                32,
            ),
        ),
        "rgba": [
            [[25, 50, 75, 255], [125, 150, 175, 255]],
        ],
    },
    {
        "name": "rgb12-be",
        "buffer": build_dpx_buffer(
            2,
            1,
            50,
            12,
            packing=1,
            data=pack_words([0xABC0, 0x1230, 0xFFF0, 0x0010, 0x8000, 0x7FF0], 16),
        ),
        "rgba": [
            [[0xAB, 0x12, 0xFF, 255], [0x00, 0x80, 0x7F, 255]],
        ],
    },
    {
        "name": "rgba16-be",
        "buffer": build_dpx_buffer(
            2,
            1,
            51,
            16,
            data=pack_words(
                [0x1000, 0x2000, 0x3000, 0x4000, 0x5000, 0x6000, 0x7000, 0x8000],
                16,
            ),
        ),
        "rgba": [
            [[0x10, 0x20, 0x30, 255], [0x50, 0x60, 0x70, 255]],
        ],
    },
    {
        # 12-bit always reads 3 components per pixel
        "name": "luma12-le",
        "buffer": build_dpx_buffer(
            1,
            1,
            5,
            12,
            packing=1,
            data=pack_words([0x1100, 0x2200, 0x3300], 16, little_endian=True),
            little_endian=True,
        ),
        "rgba": [
            [[0x11, 0x22, 0x33, 255]],
        ],
    },
    {
        "name": "empty",
        "buffer": build_dpx_buffer(0, 0, 50, 8),
        "rgba": np.zeros((0, 0, 4), dtype=np.uint8),
    },
]

decodeErrorTestCases = [
    {
        "name": "truncated-rgb8",
        "buffer": build_dpx_buffer(2, 2, 50, 8, data=bytes(10)),
        "exception": dpxtools_common.PixelReadException,
        "coordinates": (1, 1, 1),
    },
    {
        # exact-size 1-component data fails on the last pixel
        "name": "luma8-exact",
        "buffer": build_dpx_buffer(3, 1, 5, 8, data=bytes(3)),
        "exception": dpxtools_common.PixelReadException,
        "coordinates": (2, 0, 1),
    },
    {
        "name": "no-data",
        "buffer": build_dpx_buffer(2, 1, 50, 16),
        "exception": dpxtools_common.PixelReadException,
        "coordinates": (0, 0, 0),
    },
    {
        # corrupt header: the image data backs only the first 2 pixels
        "name": "huge-dimensions-rgb8",
        "buffer": build_dpx_buffer(0xFFFFFFFF, 0xFFFFFFFF, 50, 8, data=bytes(6)),
        "exception": dpxtools_common.PixelReadException,
        "coordinates": (2, 0, 0),
    },
    {
        "name": "huge-dimensions-rgb16",
        "buffer": build_dpx_buffer(0xFFFFFFFF, 0xFFFFFFFF, 50, 16, data=bytes(6)),
        "exception": dpxtools_common.PixelReadException,
        "coordinates": (1, 0, 0),
    },
    {
        "name": "huge-height-no-data",
        "buffer": build_dpx_buffer(1, 0xFFFFFFFF, 51, 10),
        "exception": dpxtools_common.PixelReadException,
        "coordinates": (0, 0, 0),
    },
    {
        "name": "unsupported-4bit",
        "buffer": build_dpx_buffer(2, 1, 50, 4, data=bytes(8)),
        "exception": dpxtools_common.UnsupportedFormatException,
    },
    {
        "name": "unsupported-10bit-cbycr",
        "buffer": build_dpx_buffer(2, 1, 102, 10, data=bytes(8)),
        "exception": dpxtools_common.UnsupportedFormatException,
    },
]


class MainTest(dpxtools_unittest.TestCase):
    def testDecode(self):
        """decode test."""
        function_name = "testDecode"
        for test_case in self.getTestCases(function_name, decodeTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            buffer = test_case["buffer"]
            header = dpxtools_header.parse_header(buffer, debug=-1)
            raster = dpxtools_raster.decode(buffer, header, debug=-1)
            self.compareRaster(raster, test_case["rgba"], test_case["name"])
            self.assertEqual(header.width, raster.width)
            self.assertEqual(header.height, raster.height)
            self.assertEqual(header.width * header.height * 4, len(raster.tobytes()))

    def testDecodeMatchesReadComponent(self):
        """frame and per-pixel decoding produce the same raster."""
        function_name = "testDecodeMatchesReadComponent"
        for test_case in self.getTestCases(function_name, decodeTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            buffer = test_case["buffer"]
            header = dpxtools_header.parse_header(buffer, debug=-1)
            raster = dpxtools_raster.decode(buffer, header, debug=-1)
            for y in range(header.height):
                for x in range(header.width):
                    for c in range(3):
                        self.assertEqual(
                            dpxtools_decoder.read_component(buffer, header, x, y, c),
                            raster.rgba[y][x][c],
                            f"error on {test_case['name']} case {x=} {y=} {c=}",
                        )

    def testDecodeBytes(self):
        """the raster bytes are row-major RGBA8."""
        buffer = build_dpx_buffer(2, 1, 50, 8, data=bytes([10, 20, 30, 40, 50, 60]))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        raster = dpxtools_raster.decode(buffer, header, debug=-1)
        self.assertEqual(bytes([10, 20, 30, 255, 40, 50, 60, 255]), raster.tobytes())

    def testDecodeError(self):
        """the first error aborts the decode."""
        function_name = "testDecodeError"
        for test_case in self.getTestCases(function_name, decodeErrorTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            buffer = test_case["buffer"]
            header = dpxtools_header.parse_header(buffer, debug=-1)
            with self.assertRaises(test_case["exception"]) as cm:
                dpxtools_raster.decode(buffer, header, debug=-1)
            if "coordinates" in test_case:
                self.assertEqual(
                    test_case["coordinates"],
                    (cm.exception.x, cm.exception.y, cm.exception.c),
                )

    def testDecodeCheckDataSize(self):
        """fail-fast data size check."""
        buffer = build_dpx_buffer(2, 2, 50, 8, data=bytes(10))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        config = dpxtools_common.Config()
        config.set("check_data_size", True)
        with self.assertRaises(dpxtools_common.TruncatedDataException) as cm:
            dpxtools_raster.decode(buffer, header, config=config, debug=-1)
        self.assertEqual(12, cm.exception.expected)
        self.assertEqual(10, cm.exception.available)
        # unsupported formats are reported before the size check
        buffer = build_dpx_buffer(2, 2, 50, 4)
        header = dpxtools_header.parse_header(buffer, debug=-1)
        with self.assertRaises(dpxtools_common.UnsupportedFormatException):
            dpxtools_raster.decode(buffer, header, config=config, debug=-1)

    def testDecodeDoesNotModifyBuffer(self):
        buffer = bytearray(
            build_dpx_buffer(2, 1, 50, 8, data=bytes([10, 20, 30, 40, 50, 60]))
        )
        original = bytes(buffer)
        header = dpxtools_header.parse_header(buffer, debug=-1)
        raster = dpxtools_raster.decode(buffer, header, debug=-1)
        self.assertEqual(original, bytes(buffer))
        # the raster is independent of the buffer
        buffer[2048] = 99
        self.assertEqual(10, raster.rgba[0][0][0])

    def testRasterIsReadOnly(self):
        buffer = build_dpx_buffer(2, 1, 50, 8, data=bytes(6))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        raster = dpxtools_raster.decode(buffer, header, debug=-1)
        self.assertFalse(raster.rgba.flags.writeable)
        with self.assertRaises(ValueError):
            raster.rgba[0][0][0] = 1

    def testDecodeLogging(self):
        # 10-bit RGBA is decoded pixel by pixel
        buffer = build_dpx_buffer(1, 2, 51, 10, data=bytes(12))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        logfd = io.StringIO()
        dpxtools_raster.decode(buffer, header, logfd=logfd, debug=2)
        log = logfd.getvalue()
        self.assertIn("debug: y=0", log)
        self.assertIn("debug: y=1", log)
        self.assertIn("debug: decoded 1x2 raster", log)
        # complete 8-bit data is decoded as a frame
        buffer = build_dpx_buffer(2, 2, 50, 8, data=bytes(12))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        logfd = io.StringIO()
        dpxtools_raster.decode(buffer, header, logfd=logfd, debug=2)
        log = logfd.getvalue()
        self.assertNotIn("debug: y=0", log)
        self.assertIn("debug: decoded 2x2 raster (frame)", log)


class DPXImageTest(dpxtools_unittest.TestCase):
    def testLifecycle(self):
        """undecoded -> decoded transition."""
        buffer = build_dpx_buffer(2, 1, 50, 8, data=bytes([10, 20, 30, 40, 50, 60]))
        dpx_image = dpxtools_raster.DPXImage.FromBuffer(buffer, debug=-1)
        self.assertFalse(dpx_image.IsDecoded())
        self.assertEqual(2, dpx_image.GetHeader().width)
        self.assertEqual(buffer, dpx_image.GetBuffer())
        raster = dpx_image.GetRaster()
        self.assertTrue(dpx_image.IsDecoded())
        self.compareRaster(
            raster, [[[10, 20, 30, 255], [40, 50, 60, 255]]], "lifecycle"
        )
        # decoding happens once
        self.assertIs(raster, dpx_image.GetRaster())
        # the buffer is kept by default
        self.assertEqual(buffer, dpx_image.GetBuffer())

    def testDropBuffer(self):
        buffer = build_dpx_buffer(2, 1, 50, 8, data=bytes([10, 20, 30, 40, 50, 60]))
        config = dpxtools_common.Config()
        config.set("drop_buffer", True)
        dpx_image = dpxtools_raster.DPXImage.FromBuffer(buffer, config=config, debug=-1)
        raster = dpx_image.GetRaster()
        self.assertIsNone(dpx_image.GetBuffer())
        self.assertIs(raster, dpx_image.GetRaster())
        self.assertEqual(60, raster.rgba[0][1][2])

    def testFromBufferErrors(self):
        with self.assertRaises(dpxtools_common.NotDPXException):
            dpxtools_raster.DPXImage.FromBuffer(b"\x89PNG\r\n\x1a\n", debug=-1)
        # decode errors happen on GetRaster(), and leave the image undecoded
        buffer = build_dpx_buffer(2, 1, 50, 8, data=bytes(5))
        dpx_image = dpxtools_raster.DPXImage.FromBuffer(buffer, debug=-1)
        with self.assertRaises(dpxtools_common.PixelReadException):
            dpx_image.GetRaster()
        self.assertFalse(dpx_image.IsDecoded())
        self.assertIsNotNone(dpx_image.GetBuffer())


if __name__ == "__main__":
    dpxtools_unittest.main(sys.argv)
