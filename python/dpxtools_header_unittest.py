#!/usr/bin/env python3

"""dpxtools_header_unittest.py: dpxtools_header unittest.

# runme
# $ ./dpxtools_header_unittest.py
"""

import io
import sys

import dpxtools_common
import dpxtools_header
import dpxtools_layout
import dpxtools_unittest


parseHeaderTestCases = [
    {
        "name": "rgb8-be",
        "buffer": dpxtools_unittest.build_dpx_buffer(
            2, 1, 50, 8, data=bytes([10, 20, 30, 40, 50, 60])
        ),
        "header": {
            "little_endian": False,
            "offset": 2048,
            "width": 2,
            "height": 1,
            "description": 50,
            "bit_size": 8,
            "packing": 0,
            "num_components": 3,
            "component_type": dpxtools_layout.ComponentType.rgb,
            "version": "V2.0",
            "file_size": 2054,
            "element_count": 1,
        },
    },
    {
        "name": "rgb10-le",
        "buffer": dpxtools_unittest.build_dpx_buffer(
            300, 200, 50, 10, packing=1, little_endian=True, version=b"V1.0"
        ),
        "header": {
            "little_endian": True,
            "offset": 2048,
            "width": 300,
            "height": 200,
            "description": 50,
            "bit_size": 10,
            "packing": 1,
            "num_components": 3,
            "component_type": dpxtools_layout.ComponentType.rgb,
            "version": "V1.0",
            "file_size": 2048,
            "element_count": 1,
        },
    },
    {
        "name": "rgba16-be-offset",
        "buffer": dpxtools_unittest.build_dpx_buffer(
            1920, 1080, 51, 16, offset=8192
        ),
        "header": {
            "little_endian": False,
            "offset": 8192,
            "width": 1920,
            "height": 1080,
            "description": 51,
            "bit_size": 16,
            "packing": 0,
            "num_components": 4,
            "component_type": dpxtools_layout.ComponentType.rgba,
        },
    },
    {
        "name": "luma12-le",
        "buffer": dpxtools_unittest.build_dpx_buffer(
            4, 4, 5, 12, packing=1, little_endian=True
        ),
        "header": {
            "little_endian": True,
            "width": 4,
            "height": 4,
            "description": 5,
            "bit_size": 12,
            "packing": 1,
            "num_components": 1,
            "component_type": dpxtools_layout.ComponentType.luminance,
        },
    },
    {
        "name": "user-defined-8",
        "buffer": dpxtools_unittest.build_dpx_buffer(1, 1, 156, 8),
        "header": {
            "description": 156,
            "num_components": 8,
            "component_type": dpxtools_layout.ComponentType.user_defined_8,
        },
    },
]

# a valid header with different first 4 bytes
VALID_BUFFER = dpxtools_unittest.build_dpx_buffer(2, 1, 50, 8, data=bytes(6))

notDPXTestCases = [
    {"name": "zero", "buffer": b"\x00\x00\x00\x00" + VALID_BUFFER[4:]},
    {"name": "png", "buffer": b"\x89PNG" + VALID_BUFFER[4:]},
    {"name": "lowercase", "buffer": b"SDPx" + VALID_BUFFER[4:]},
    {"name": "half-swapped", "buffer": b"SDXP" + VALID_BUFFER[4:]},
    {"name": "empty", "buffer": b""},
    {"name": "short", "buffer": b"SDP"},
]

truncatedHeaderTestCases = [
    {"name": "magic-only", "buffer": VALID_BUFFER[:4], "offset": 4},
    {"name": "generic-header", "buffer": VALID_BUFFER[:10], "offset": 8},
    {"name": "no-iiheader", "buffer": VALID_BUFFER[:768], "offset": 768},
    {"name": "no-description", "buffer": VALID_BUFFER[:800], "offset": 800},
    {"name": "no-packing", "buffer": VALID_BUFFER[:805], "offset": 804},
]


class MainTest(dpxtools_unittest.TestCase):
    def testParseHeader(self):
        """parse_header test."""
        function_name = "testParseHeader"
        for test_case in self.getTestCases(function_name, parseHeaderTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            header = dpxtools_header.parse_header(test_case["buffer"], debug=-1)
            for key, expected_val in test_case["header"].items():
                self.assertEqual(
                    expected_val,
                    getattr(header, key),
                    f"error on {test_case['name']} case {key=}",
                )

    def testParseHeaderIsDeterministic(self):
        """parse_header returns the same record for the same bytes."""
        function_name = "testParseHeaderIsDeterministic"
        for test_case in self.getTestCases(function_name, parseHeaderTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            header1 = dpxtools_header.parse_header(test_case["buffer"], debug=-1)
            header2 = dpxtools_header.parse_header(
                bytearray(test_case["buffer"]), debug=-1
            )
            self.assertEqual(header1, header2)
            self.assertEqual(hash(header1), hash(header2))

    def testEndianness(self):
        """the file endianness is used for all the fields."""
        buffer = dpxtools_unittest.build_dpx_buffer(2, 1, 50, 8)
        header = dpxtools_header.parse_header(buffer, debug=-1)
        self.assertFalse(header.little_endian)
        self.assertEqual(dpxtools_common.Endianness.big, header.endianness)
        # same bytes, little-endian magic
        swapped_buffer = b"XPDS" + buffer[4:]
        header = dpxtools_header.parse_header(swapped_buffer, debug=-1)
        self.assertTrue(header.little_endian)
        self.assertEqual(dpxtools_common.Endianness.little, header.endianness)
        self.assertEqual(0x02000000, header.width)
        self.assertEqual(0x01000000, header.height)
        self.assertEqual(0x00080000, header.offset)

    def testNotDPX(self):
        """invalid magic number test."""
        function_name = "testNotDPX"
        for test_case in self.getTestCases(function_name, notDPXTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            with self.assertRaises(dpxtools_common.NotDPXException) as cm:
                dpxtools_header.parse_header(test_case["buffer"], debug=-1)
            self.assertIsInstance(cm.exception, dpxtools_common.ParseException)
            self.assertEqual("Invalid format: not a DPX file", str(cm.exception))

    def testTruncatedHeader(self):
        """short buffer test."""
        function_name = "testTruncatedHeader"
        for test_case in self.getTestCases(function_name, truncatedHeaderTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            with self.assertRaises(dpxtools_common.TruncatedHeaderException) as cm:
                dpxtools_header.parse_header(test_case["buffer"], debug=-1)
            self.assertEqual(test_case["offset"], cm.exception.offset)
            self.assertEqual(len(test_case["buffer"]), cm.exception.length)

    def testUnknownDescription(self):
        """unknown description code is a parse error."""
        buffer = dpxtools_unittest.build_dpx_buffer(2, 1, 53, 8)
        with self.assertRaises(dpxtools_common.UnknownDescriptionCodeException) as cm:
            dpxtools_header.parse_header(buffer, debug=-1)
        self.assertIsInstance(cm.exception, dpxtools_common.ParseException)
        self.assertEqual(53, cm.exception.description)

    def testHeaderIsImmutable(self):
        """DPXHeader fields cannot be set."""
        buffer = dpxtools_unittest.build_dpx_buffer(2, 1, 50, 8)
        header = dpxtools_header.parse_header(buffer, debug=-1)
        with self.assertRaises(AttributeError):
            header.width = 3
        with self.assertRaises(AttributeError):
            header.extra = 3

    def testHeaderAsDict(self):
        """as_dict() adds printable endianness and component type."""
        buffer = dpxtools_unittest.build_dpx_buffer(2, 1, 51, 10, little_endian=True)
        header = dpxtools_header.parse_header(buffer, debug=-1)
        header_dict = header.as_dict()
        self.assertEqual("little", header_dict["endianness"])
        self.assertEqual("RGBA", header_dict["component_type"])
        self.assertIn("bit_size: 10", str(header))

    def testLogging(self):
        """debug and warn messages go to logfd."""
        buffer = dpxtools_unittest.build_dpx_buffer(2, 1, 50, 8, element_count=2)
        logfd = io.StringIO()
        dpxtools_header.parse_header(buffer, logfd=logfd, debug=1)
        log = logfd.getvalue()
        self.assertIn("debug: dpx header: 2x1 8bit RGB", log)
        self.assertIn("warn: 2 image elements", log)
        # quiet
        logfd = io.StringIO()
        dpxtools_header.parse_header(buffer, logfd=logfd, debug=-1)
        self.assertEqual("", logfd.getvalue())


if __name__ == "__main__":
    dpxtools_unittest.main(sys.argv)
