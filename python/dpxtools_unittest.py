#!/usr/bin/env python3

"""dpxtools_unittest.py: dpxtools unittest helpers.

Operation:
$ ./*_unittest.py  # run all the tests
$ ./*_unittest.py --list_tests  # list all available tests
$ ./*_unittest.py --filter <filter>
where:
  <filter> := <test_filter_item> [":" <test_filter_item>]*
  <test_filter_item> := <test_function>.<test_name>
  <test_function> := <string> | "*"
  <test_name> := <string> | "*"

Examples:
```
$ ./*_unittest.py --filter TestFunction:TestFunction2.t*
$ ./*_unittest.py --filter *.TestName:*.TestName2*
```
"""

import argparse
import fnmatch
import numpy as np
import struct
import sys
import unittest

import dpxtools_header

# defaults when not running through main() (e.g. pytest)
FILTER = None
LIST_TESTS = False

DEFAULT_OFFSET = 2048


def build_dpx_buffer(
    width,
    height,
    description,
    bit_size,
    data=b"",
    offset=DEFAULT_OFFSET,
    packing=0,
    little_endian=False,
    element_count=1,
    version=b"V2.0",
):
    """Build a synthetic DPX file.

    Only the fields read by the header parser are set. The header is
    zero-padded up to offset, and followed by the image data.
    """
    endian = "<" if little_endian else ">"
    header = bytearray(max(offset, dpxtools_header.element_offset(1)))
    header[0:4] = b"SDPX" if not little_endian else b"XPDS"
    struct.pack_into(f"{endian}I", header, 4, offset)
    header[8 : 8 + len(version)] = version
    struct.pack_into(f"{endian}I", header, 16, offset + len(data))
    iiheader = dpxtools_header.IIHEADER_OFFSET
    struct.pack_into(f"{endian}HHII", header, iiheader, 0, element_count, width, height)
    element = dpxtools_header.element_offset(0)
    header[element + 20] = description
    header[element + 23] = bit_size
    struct.pack_into(f"{endian}H", header, element + 24, packing)
    return bytes(header[:offset]) + bytes(data)


def pack_words(words, bits, little_endian=False):
    endian = "<" if little_endian else ">"
    fmt = {16: "H", 32: "I"}[bits]
    return struct.pack(f"{endian}{len(words)}{fmt}", *words)


# 10-bit components, 3 per 32-bit word, padding last
def pack_10bit_word(c0, c1, c2):
    return (c0 << 22) | (c1 << 12) | (c2 << 2)


class TestCase(unittest.TestCase):
    def getTestCases(self, function_name, test_case_list):
        global LIST_TESTS
        global FILTER

        list_tests = LIST_TESTS
        filter_string = FILTER

        if list_tests:
            print(f" {function_name}.")
            for test_case in test_case_list:
                print(f"  {function_name}.{test_case['name']}")
            self.skipTest("list test")

        return self.filterTestCases(function_name, test_case_list, filter_string)

    def filterTestCases(self, function_name, test_case_list, filter_string):
        if not filter_string:
            return test_case_list

        # each filter item is of the form TestFunction.TestName, supports '*'
        filters = filter_string.split(":")
        matched_test_case_name_list = set()
        for filt in filters:
            try:
                func_pat, case_pat = filt.split(".", 1)
            except ValueError:
                continue  # skip invalid filters
            if fnmatch.fnmatch(function_name, func_pat):
                for test_case in test_case_list:
                    if fnmatch.fnmatch(test_case["name"], case_pat):
                        matched_test_case_name_list.add(test_case["name"])
        matched_test_case_list = []
        for test_case in test_case_list:
            if test_case["name"] in matched_test_case_name_list:
                matched_test_case_list.append(test_case)
        return list(matched_test_case_list)

    # function to compare 2 rasters
    @classmethod
    def compareRaster(cls, raster, expected_rgba, label):
        expected_rgba = np.asarray(expected_rgba, dtype=np.uint8)
        assert raster.rgba.shape == expected_rgba.shape, (
            f"error on {label} case: wrong shape "
            f"{raster.rgba.shape} != {expected_rgba.shape}"
        )
        np.testing.assert_array_equal(
            raster.rgba,
            expected_rgba,
            err_msg=f"error on {label} case",
        )


def main(argv):
    global FILTER
    global LIST_TESTS

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--list_tests",
        action="store_true",
        dest="list_tests",
        default=False,
        help="List Tests",
    )
    parser.add_argument(
        "--filter",
        dest="filter",
        default=None,
        metavar="filter",
        help="Filter String",
    )

    options, unknown_options = parser.parse_known_args()
    FILTER = options.filter
    LIST_TESTS = options.list_tests
    # clean sys.argv before passing to unittest
    sys.argv = [sys.argv[0]] + unknown_options
    unittest.main()
