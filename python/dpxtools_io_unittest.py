#!/usr/bin/env python3

"""dpxtools_io_unittest.py: dpxtools_io unittest.

# runme
# $ ./dpxtools_io_unittest.py
"""

import cv2
import os
import sys
import tempfile

import dpxtools_common
import dpxtools_io
import dpxtools_raster
import dpxtools_unittest


RGBA = [
    [[10, 20, 30, 255], [40, 50, 60, 255]],
    [[0, 0, 0, 255], [255, 255, 255, 255]],
]

writeRasterTestCases = [
    {"name": "rgba", "extension": ".rgba"},
    {"name": "png", "extension": ".png"},
]


class MainTest(dpxtools_unittest.TestCase):
    def testReadDPXFile(self):
        buffer = dpxtools_unittest.build_dpx_buffer(2, 1, 50, 8, data=bytes(6))
        with tempfile.TemporaryDirectory() as tmpdir:
            infile = os.path.join(tmpdir, "image.dpx")
            with open(infile, "wb") as fout:
                fout.write(buffer)
            self.assertEqual(buffer, dpxtools_io.read_dpx_file(infile, debug=-1))

    def testReadMissingFile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            infile = os.path.join(tmpdir, "missing.dpx")
            with self.assertRaises(dpxtools_common.BufferReadException) as cm:
                dpxtools_io.read_dpx_file(infile, debug=-1)
        self.assertIsInstance(cm.exception.__cause__, OSError)
        self.assertIn("missing.dpx", str(cm.exception))

    def testWriteRasterFile(self):
        """write_raster_file test."""
        function_name = "testWriteRasterFile"
        data = bytes(val for row in RGBA for pixel in row for val in pixel)
        raster = dpxtools_raster.DecodedRaster.FromBuffer(data, 2, 2)
        for test_case in self.getTestCases(function_name, writeRasterTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            with tempfile.TemporaryDirectory() as tmpdir:
                outfile = os.path.join(tmpdir, "image" + test_case["extension"])
                dpxtools_io.write_raster_file(outfile, raster, debug=-1)
                if test_case["extension"] == ".rgba":
                    with open(outfile, "rb") as fin:
                        self.assertEqual(data, fin.read())
                    continue
                # lossless formats read back the same pixels
                outbgra = cv2.imread(outfile, cv2.IMREAD_UNCHANGED)
                outrgba = cv2.cvtColor(outbgra, cv2.COLOR_BGRA2RGBA)
                read_raster = dpxtools_raster.DecodedRaster(outrgba)
                self.compareRaster(read_raster, RGBA, test_case["name"])


if __name__ == "__main__":
    dpxtools_unittest.main(sys.argv)
