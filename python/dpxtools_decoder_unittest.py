#!/usr/bin/env python3

"""dpxtools_decoder_unittest.py: dpxtools_decoder unittest.

# runme
# $ ./dpxtools_decoder_unittest.py
"""

import io
import sys

import dpxtools_common
import dpxtools_decoder
import dpxtools_header
import dpxtools_unittest

build_dpx_buffer = dpxtools_unittest.build_dpx_buffer
pack_words = dpxtools_unittest.pack_words
pack_10bit_word = dpxtools_unittest.pack_10bit_word


readComponentTestCases = [
    {
        "name": "rgb8",
        "buffer": build_dpx_buffer(2, 2, 50, 8, data=bytes(range(1, 13))),
        "components": {
            # (x, y, c): value
            (0, 0, 0): 1,
            (0, 0, 2): 3,
            (1, 0, 0): 4,
            (0, 1, 1): 8,
            (1, 1, 2): 12,
        },
    },
    {
        "name": "rgba8",
        "buffer": build_dpx_buffer(2, 1, 51, 8, data=bytes(range(1, 9))),
        "components": {
            (0, 0, 3): 4,
            (1, 0, 0): 5,
            (1, 0, 3): 8,
        },
    },
    {
        "name": "luma8",
        "buffer": build_dpx_buffer(3, 1, 5, 8, data=bytes([7, 8, 9])),
        "components": {
            (0, 0, 0): 7,
            (1, 0, 0): 8,
            (2, 0, 0): 9,
            # channels 1 and 2 are read using the declared layout
            (0, 0, 1): 8,
            (0, 0, 2): 9,
        },
    },
    {
        "name": "rgb16-be",
        "buffer": build_dpx_buffer(
            1, 1, 50, 16, data=pack_words([0x4000, 0xFFFF, 0x00FF], 16)
        ),
        "components": {
            (0, 0, 0): 0x40,
            (0, 0, 1): 0xFF,
            (0, 0, 2): 0x00,
        },
    },
    {
        "name": "rgb16-le",
        "buffer": build_dpx_buffer(
            1,
            1,
            50,
            16,
            data=pack_words([0x4000, 0xFFFF, 0x01FF], 16, little_endian=True),
            little_endian=True,
        ),
        "components": {
            (0, 0, 0): 0x40,
            (0, 0, 1): 0xFF,
            (0, 0, 2): 0x01,
        },
    },
    {
        "name": "rgb10-be",
        "buffer": build_dpx_buffer(
            2,
            1,
            50,
            10,
            packing=1,
            data=pack_words([0x3FF00000, pack_10bit_word(1023, 512, 256)], 32),
        ),
        "components": {
            (0, 0, 0): 0x3F,
            (0, 0, 1): 0xC0,
            (0, 0, 2): 0x00,
            (1, 0, 0): 255,
            (1, 0, 1): 128,
            (1, 0, 2): 64,
        },
    },
    {
        "name": "rgb10-le",
        "buffer": build_dpx_buffer(
            1,
            1,
            50,
            10,
            packing=1,
            data=pack_words([pack_10bit_word(4, 400, 1000)], 32, little_endian=True),
            little_endian=True,
        ),
        "components": {
            (0, 0, 0): 1,
            (0, 0, 1): 100,
            (0, 0, 2): 250,
        },
    },
    {
        # word 0: R0 G0 B0, word 1: A0 R1 G1, word 2: B1 A1 (pad)
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
        "components": {
            (0, 0, 0): 25,
            (0, 0, 1): 50,
            (0, 0, 2): 75,
            (0, 0, 3): 100,
            (1, 0, 0): 125,
            (1, 0, 1): 150,
            (1, 0, 2): 175,
            (1, 0, 3): 200,
        },
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
        "components": {
            (0, 0, 0): 0xAB,
            (0, 0, 1): 0x12,
            (0, 0, 2): 0xFF,
            (1, 0, 0): 0x00,
            (1, 0, 1): 0x80,
            (1, 0, 2): 0x7F,
        },
    },
    {
        "name": "rgb12-le",
        "buffer": build_dpx_buffer(
            1,
            1,
            50,
            12,
            packing=1,
            data=pack_words([0xABC0, 0x1230, 0xFFF0], 16, little_endian=True),
            little_endian=True,
        ),
        "components": {
            (0, 0, 0): 0xAB,
            (0, 0, 1): 0x12,
            (0, 0, 2): 0xFF,
        },
    },
]

unsupportedFormatTestCases = [
    {"name": "4bit", "description": 50, "bit_size": 4, "packing": 0},
    {"name": "1bit", "description": 5, "bit_size": 1, "packing": 0},
    {"name": "32bit", "description": 50, "bit_size": 32, "packing": 0},
    {"name": "10bit-abgr", "description": 52, "bit_size": 10, "packing": 1},
    {"name": "10bit-luma", "description": 5, "bit_size": 10, "packing": 1},
    {"name": "10bit-cbycr", "description": 102, "bit_size": 10, "packing": 1},
]

pixelReadTestCases = [
    # invalid coordinates
    {
        "name": "x-past-width",
        "buffer": build_dpx_buffer(2, 2, 50, 8, data=bytes(12)),
        "coordinates": (2, 0, 0),
    },
    {
        "name": "y-past-height",
        "buffer": build_dpx_buffer(2, 2, 50, 8, data=bytes(12)),
        "coordinates": (0, 2, 0),
    },
    {
        "name": "negative-x",
        "buffer": build_dpx_buffer(2, 2, 50, 8, data=bytes(12)),
        "coordinates": (-1, 0, 0),
    },
    {
        "name": "rgb-channel-3",
        "buffer": build_dpx_buffer(1, 1, 50, 10, data=bytes(4)),
        "coordinates": (0, 0, 3),
    },
    # reads past the end of the buffer
    {
        "name": "truncated-rgb8",
        "buffer": build_dpx_buffer(2, 1, 50, 8, data=bytes(5)),
        "coordinates": (1, 0, 2),
    },
    {
        "name": "truncated-rgb16",
        "buffer": build_dpx_buffer(1, 1, 50, 16, data=bytes(5)),
        "coordinates": (0, 0, 2),
    },
    {
        "name": "truncated-rgb10",
        "buffer": build_dpx_buffer(2, 1, 50, 10, data=bytes(7)),
        "coordinates": (1, 0, 0),
    },
    {
        "name": "truncated-rgba10",
        "buffer": build_dpx_buffer(2, 1, 51, 10, data=bytes(8)),
        "coordinates": (1, 0, 2),
    },
    {
        "name": "truncated-rgb12",
        "buffer": build_dpx_buffer(1, 1, 50, 12, data=bytes(4)),
        "coordinates": (0, 0, 2),
    },
    {
        "name": "luma8-last-pixel-channel-1",
        "buffer": build_dpx_buffer(3, 1, 5, 8, data=bytes(3)),
        "coordinates": (2, 0, 1),
    },
]

expectedDataSizeTestCases = [
    {"name": "rgb8", "args": (4, 2, 50, 8), "size": 24},
    {"name": "luma8", "args": (4, 2, 5, 8), "size": 8},
    {"name": "rgba16", "args": (4, 2, 51, 16), "size": 64},
    {"name": "rgb10", "args": (4, 2, 50, 10), "size": 32},
    # 32 components -> 11 words
    {"name": "rgba10", "args": (4, 2, 51, 10), "size": 44},
    {"name": "rgba10-exact", "args": (3, 1, 51, 10), "size": 16},
    {"name": "luma12", "args": (4, 2, 5, 12), "size": 48},
]


class MainTest(dpxtools_unittest.TestCase):
    def testReadComponent(self):
        """read_component test."""
        function_name = "testReadComponent"
        for test_case in self.getTestCases(function_name, readComponentTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            buffer = test_case["buffer"]
            header = dpxtools_header.parse_header(buffer, debug=-1)
            for (x, y, c), expected_value in test_case["components"].items():
                value = dpxtools_decoder.read_component(buffer, header, x, y, c)
                self.assertEqual(
                    expected_value,
                    value,
                    f"error on {test_case['name']} case {x=} {y=} {c=}",
                )

    def testGetRfun(self):
        """one read function per bit depth rule."""
        expected_rfuns = (
            ((8, 50), dpxtools_decoder.rfun_8),
            ((8, 103), dpxtools_decoder.rfun_8),
            ((16, 5), dpxtools_decoder.rfun_16),
            ((10, 50), dpxtools_decoder.rfun_10_rgb),
            ((10, 51), dpxtools_decoder.rfun_10_rgba),
            ((12, 50), dpxtools_decoder.rfun_12),
            ((12, 152), dpxtools_decoder.rfun_12),
        )
        for (bit_size, description), expected_rfun in expected_rfuns:
            buffer = build_dpx_buffer(1, 1, description, bit_size)
            header = dpxtools_header.parse_header(buffer, debug=-1)
            self.assertIs(expected_rfun, dpxtools_decoder.get_rfun(header))

    def testFrameRead(self):
        """frame read functions, and the layouts without one."""
        buffer = build_dpx_buffer(
            2,
            1,
            50,
            10,
            data=pack_words([0x3FF00000, pack_10bit_word(1023, 512, 256)], 32),
        )
        header = dpxtools_header.parse_header(buffer, debug=-1)
        ffun = dpxtools_decoder.get_ffun(header)
        self.assertIs(dpxtools_decoder.ffun_10_rgb, ffun)
        self.assertEqual(
            [[[0x3F, 0xC0, 0x00], [255, 128, 64]]], ffun(buffer, header).tolist()
        )
        # 10-bit RGBA components cross pixel boundaries
        buffer = build_dpx_buffer(1, 1, 51, 10, data=bytes(8))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        self.assertIsNone(dpxtools_decoder.get_ffun(header))
        # channels 1-2 of 1-component layouts overlap the next pixels
        for bit_size in (8, 16):
            buffer = build_dpx_buffer(3, 1, 5, bit_size, data=bytes(6))
            header = dpxtools_header.parse_header(buffer, debug=-1)
            ffun = dpxtools_decoder.get_ffun(header)
            self.assertIsNotNone(ffun)
            self.assertIsNone(ffun(buffer, header))

    def testUnsupportedFormat(self):
        """bit size/descriptor combinations without read function."""
        function_name = "testUnsupportedFormat"
        for test_case in self.getTestCases(function_name, unsupportedFormatTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            buffer = build_dpx_buffer(
                1,
                1,
                test_case["description"],
                test_case["bit_size"],
                packing=test_case["packing"],
                data=bytes(64),
            )
            header = dpxtools_header.parse_header(buffer, debug=-1)
            with self.assertRaises(dpxtools_common.UnsupportedFormatException) as cm:
                dpxtools_decoder.read_component(buffer, header, 0, 0, 0)
            self.assertEqual(test_case["bit_size"], cm.exception.bit_size)
            self.assertEqual(header.component_type, cm.exception.component_type)
            self.assertEqual(test_case["packing"], cm.exception.packing)
            self.assertIsInstance(cm.exception, dpxtools_common.DecodeException)

    def testUnsupportedFormatMessage(self):
        buffer = build_dpx_buffer(1, 1, 52, 10, packing=1, data=bytes(4))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        with self.assertRaises(dpxtools_common.UnsupportedFormatException) as cm:
            dpxtools_decoder.get_rfun(header)
        self.assertEqual("Unsupported pixel type: 10bit ABGR-1", str(cm.exception))

    def testPixelRead(self):
        """out-of-bounds read test."""
        function_name = "testPixelRead"
        for test_case in self.getTestCases(function_name, pixelReadTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            buffer = test_case["buffer"]
            header = dpxtools_header.parse_header(buffer, debug=-1)
            x, y, c = test_case["coordinates"]
            with self.assertRaises(dpxtools_common.PixelReadException) as cm:
                dpxtools_decoder.read_component(buffer, header, x, y, c)
            self.assertEqual((x, y, c), (cm.exception.x, cm.exception.y, cm.exception.c))
            self.assertEqual(header.bit_size, cm.exception.bit_size)
            self.assertEqual(header.description, cm.exception.description)

    def testPixelReadMessage(self):
        buffer = build_dpx_buffer(2, 1, 50, 8, data=bytes(5))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        with self.assertRaises(dpxtools_common.PixelReadException) as cm:
            dpxtools_decoder.read_component(buffer, header, 1, 0, 2)
        self.assertEqual("Failed to read image data (1,0.2,8,50)", str(cm.exception))

    def testGetExpectedDataSize(self):
        """get_expected_data_size test."""
        function_name = "testGetExpectedDataSize"
        for test_case in self.getTestCases(function_name, expectedDataSizeTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            buffer = build_dpx_buffer(*test_case["args"])
            header = dpxtools_header.parse_header(buffer, debug=-1)
            self.assertEqual(
                test_case["size"],
                dpxtools_decoder.get_expected_data_size(header),
                f"error on {test_case['name']} case",
            )

    def testCheckDataSize(self):
        """check_data_size test."""
        # exact size
        buffer = build_dpx_buffer(2, 1, 50, 8, data=bytes(6))
        header = dpxtools_header.parse_header(buffer, debug=-1)
        logfd = io.StringIO()
        dpxtools_decoder.check_data_size(header, buffer, logfd=logfd, debug=1)
        self.assertIn("expected_size=6 available_size=6", logfd.getvalue())
        # one byte short
        with self.assertRaises(dpxtools_common.TruncatedDataException) as cm:
            dpxtools_decoder.check_data_size(header, buffer[:-1], debug=-1)
        self.assertEqual(6, cm.exception.expected)
        self.assertEqual(5, cm.exception.available)
        # offset past the end of the file
        with self.assertRaises(dpxtools_common.TruncatedDataException) as cm:
            dpxtools_decoder.check_data_size(header, buffer[:1000], debug=-1)
        self.assertEqual(0, cm.exception.available)


if __name__ == "__main__":
    dpxtools_unittest.main(sys.argv)
