#!/usr/bin/env python3

"""dpxtools_dpx_unittest.py: dpxtools_dpx unittest.

# runme
# $ ./dpxtools_dpx_unittest.py
"""

import contextlib
import io
import os
import sys
import tempfile

import dpxtools_dpx
import dpxtools_unittest


RGB8_BUFFER = dpxtools_unittest.build_dpx_buffer(
    2, 1, 50, 8, data=bytes([10, 20, 30, 40, 50, 60])
)

mainTestCases = [
    {
        "name": "info",
        "buffer": RGB8_BUFFER,
        "args": ["--func", "info"],
        "outname": "info.txt",
        "return": 0,
        "output": [
            "width: 2",
            "height: 1",
            "bit_size: 8",
            "component_type: RGB",
            "endianness: big",
        ],
    },
    {
        "name": "decode-rgba",
        "buffer": RGB8_BUFFER,
        "args": ["--decode"],
        "outname": "image.rgba",
        "return": 0,
        "output": bytes([10, 20, 30, 255, 40, 50, 60, 255]),
    },
    {
        "name": "decode-check-data-size",
        "buffer": dpxtools_unittest.build_dpx_buffer(2, 1, 50, 8, data=bytes(5)),
        "args": ["--decode", "--check-data-size"],
        "outname": "image.rgba",
        "return": -1,
        "error": "error: Truncated image data",
    },
    {
        "name": "decode-truncated",
        "buffer": dpxtools_unittest.build_dpx_buffer(2, 1, 50, 8, data=bytes(5)),
        "args": ["--decode"],
        "outname": "image.rgba",
        "return": -1,
        "error": "error: Failed to read image data (1,0.2,8,50)",
    },
    {
        "name": "not-dpx",
        "buffer": b"\x89PNG\r\n\x1a\n" + bytes(1024),
        "args": ["--info"],
        "outname": "info.txt",
        "return": -1,
        "error": "error: Invalid format: not a DPX file",
    },
    {
        "name": "unsupported",
        "buffer": dpxtools_unittest.build_dpx_buffer(2, 1, 52, 10, packing=1),
        "args": ["--decode"],
        "outname": "image.rgba",
        "return": -1,
        "error": "error: Unsupported pixel type: 10bit ABGR-1",
    },
]


class MainTest(dpxtools_unittest.TestCase):
    def testMain(self):
        """main test."""
        function_name = "testMain"
        for test_case in self.getTestCases(function_name, mainTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            with tempfile.TemporaryDirectory() as tmpdir:
                infile = os.path.join(tmpdir, "image.dpx")
                with open(infile, "wb") as fout:
                    fout.write(test_case["buffer"])
                outfile = os.path.join(tmpdir, test_case["outname"])
                argv = ["dpxtools", "--quiet"] + test_case["args"]
                argv += ["-i", infile, "-o", outfile]
                stderr = io.StringIO()
                with contextlib.redirect_stderr(stderr):
                    ret = dpxtools_dpx.main(argv)
                self.assertEqual(
                    test_case["return"], ret, f"error on {test_case['name']} case"
                )
                if "error" in test_case:
                    self.assertIn(test_case["error"], stderr.getvalue())
                    continue
                with open(outfile, "rb") as fin:
                    output = fin.read()
                if isinstance(test_case["output"], bytes):
                    self.assertEqual(test_case["output"], output)
                else:
                    for line in test_case["output"]:
                        self.assertIn(line, output.decode("ascii").splitlines())

    def testDecodeRequiresOutfile(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            ret = dpxtools_dpx.main(["dpxtools", "--decode", "-i", "image.dpx"])
        self.assertEqual(-1, ret)
        self.assertIn("decode requires an output file", stderr.getvalue())

    def testMissingFile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            infile = os.path.join(tmpdir, "missing.dpx")
            outfile = os.path.join(tmpdir, "info.txt")
            stderr = io.StringIO()
            with contextlib.redirect_stderr(stderr):
                ret = dpxtools_dpx.main(["dpxtools", "-i", infile, "-o", outfile])
        self.assertEqual(-1, ret)
        self.assertIn("error: Failed to read file", stderr.getvalue())

    def testLogfile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            infile = os.path.join(tmpdir, "image.dpx")
            with open(infile, "wb") as fout:
                fout.write(RGB8_BUFFER)
            outfile = os.path.join(tmpdir, "image.rgba")
            logfile = os.path.join(tmpdir, "log.txt")
            argv = ["dpxtools", "-d", "--decode", "-i", infile, "-o", outfile]
            argv += ["--logfile", logfile]
            self.assertEqual(0, dpxtools_dpx.main(argv))
            with open(logfile, "r") as fin:
                log = fin.read()
        self.assertIn("debug: dpx header: 2x1 8bit RGB", log)
        self.assertIn("debug: decoded 2x1 raster", log)

    def testHugeDimensions(self):
        """a corrupt header is reported as a decode error."""
        buffer = dpxtools_unittest.build_dpx_buffer(
            0xFFFFFFFF, 0xFFFFFFFF, 50, 8, data=bytes(6)
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            infile = os.path.join(tmpdir, "image.dpx")
            with open(infile, "wb") as fout:
                fout.write(buffer)
            outfile = os.path.join(tmpdir, "image.rgba")
            argv = ["dpxtools", "--quiet", "--decode", "-i", infile, "-o", outfile]
            stderr = io.StringIO()
            with contextlib.redirect_stderr(stderr):
                ret = dpxtools_dpx.main(argv)
            self.assertFalse(os.path.exists(outfile))
        self.assertEqual(-1, ret)
        self.assertIn("error: Failed to read image data (2,0.0,8,50)", stderr.getvalue())

    def testGetLogfd(self):
        """log lines do not go to stdout when it is the output."""
        options = dpxtools_dpx.get_options(["dpxtools", "-o", "/dev/fd/1"])
        self.assertIs(sys.stderr, dpxtools_dpx.get_logfd(options))
        options = dpxtools_dpx.get_options(["dpxtools", "-o", "info.txt"])
        self.assertIs(sys.stdout, dpxtools_dpx.get_logfd(options))

    def testWarnWithStdoutOutput(self):
        buffer = dpxtools_unittest.build_dpx_buffer(
            2, 1, 50, 8, data=bytes(6), element_count=2
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            infile = os.path.join(tmpdir, "image.dpx")
            with open(infile, "wb") as fout:
                fout.write(buffer)
            stderr = io.StringIO()
            with contextlib.redirect_stderr(stderr):
                ret = dpxtools_dpx.main(["dpxtools", "--info", "-i", infile, "-o", "-"])
        self.assertEqual(0, ret)
        self.assertIn("warn: 2 image elements", stderr.getvalue())

    def testVersion(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            ret = dpxtools_dpx.main(["dpxtools", "--version"])
        self.assertEqual(0, ret)
        self.assertEqual(f"version: {dpxtools_dpx.__version__}\n", stdout.getvalue())

    def testGetOptions(self):
        options = dpxtools_dpx.get_options(
            ["dpxtools", "-ddd", "--decode", "--drop-buffer", "-i", "a", "-o", "b"]
        )
        self.assertEqual(3, options.debug)
        self.assertEqual("decode", options.func)
        self.assertTrue(options.drop_buffer)
        self.assertFalse(options.check_data_size)
        options = dpxtools_dpx.get_options(["dpxtools", "--quiet"])
        self.assertEqual(-1, options.debug)
        self.assertEqual("info", options.func)


if __name__ == "__main__":
    dpxtools_unittest.main(sys.argv)
