#!/usr/bin/env python3

"""dpxtools_io.py module description.

Generic I/O functions: reading DPX files, and writing decoded rasters.
"""


import cv2
import numpy as np
import os.path
import sys

import dpxtools_common


def read_dpx_file(infile, logfd=sys.stdout, debug=0):
    try:
        with open(infile, "rb") as fin:
            buffer = fin.read()
    except OSError as e:
        raise dpxtools_common.BufferReadException(infile) from e
    if debug > 0:
        print(f"debug: read {len(buffer)} bytes from {infile}", file=logfd)
    return buffer


# rgba is packed, R/G/B/A components
def write_rgba(outfile, raster):
    with open(outfile, "wb") as fout:
        fout.write(raster.tobytes())


def write_raster_file(outfile, raster, logfd=sys.stdout, debug=0):
    outfile_extension = os.path.splitext(outfile)[1]
    if outfile_extension == ".rgba":
        write_rgba(outfile, raster)
    else:
        # cv2 writer requires BGRA
        outbgra = cv2.cvtColor(np.ascontiguousarray(raster.rgba), cv2.COLOR_RGBA2BGRA)
        if not cv2.imwrite(outfile, outbgra):
            raise dpxtools_common.DPXException(f"Failed to write file {outfile}")
    if debug > 0:
        print(
            f"debug: wrote {raster.width}x{raster.height} raster to {outfile}",
            file=logfd,
        )
