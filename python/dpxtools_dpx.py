#!/usr/bin/env python3

"""dpxtools_dpx.py: DPX image tool.

Prints DPX header information, or decodes DPX images into RGBA8 rasters.

Supported formats:
* 8-bit and 16-bit, any descriptor
* 10-bit RGB and RGBA (filled 32-bit words)
* 12-bit, in 16-bit containers

The output format is selected by the output file extension: ".rgba" for
packed RGBA8, or any image format supported by opencv (e.g. ".png").
"""


import argparse
import sys

import dpxtools_common
import dpxtools_raster

__version__ = "0.1"

FUNC_CHOICES = {
    "info": "print DPX header information",
    "decode": "decode DPX image into an RGBA8 image",
}


default_values = {
    "debug": 0,
    "func": "info",
    "infile": None,
    "outfile": None,
    "logfile": None,
}


def print_info(dpx_image, outfile, debug):
    # dump contents into output file
    with open(outfile, "w") as fout:
        for key, val in dpx_image.GetHeader().as_dict().items():
            fout.write(f"{key}: {val}\n")


def decode_image(dpx_image, outfile, debug):
    dpx_image.ToFile(outfile)


def get_options(argv):
    """Generic option parser.

    Args:
        argv: list containing arguments

    Returns:
        Namespace - An argparse.ArgumentParser-generated option object
    """
    # init parser
    # usage = 'usage: %prog [options] arg1 arg2'
    # parser = argparse.OptionParser(usage=usage)
    # parser.print_help() to get argparse.usage (large help)
    # parser.print_usage() to get argparse.usage (just usage line)
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "-v",
        "--version",
        action="store_true",
        dest="version",
        default=False,
        help="Print version",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="count",
        dest="debug",
        default=default_values["debug"],
        help="Increase verbosity (use multiple times for more)",
    )
    parser.add_argument(
        "--quiet",
        action="store_const",
        dest="debug",
        const=-1,
        help="Zero verbosity",
    )
    parser.add_argument(
        "--func",
        type=str,
        nargs="?",
        default=default_values["func"],
        choices=FUNC_CHOICES.keys(),
        help="%s"
        % (" | ".join("{}: {}".format(k, v) for k, v in FUNC_CHOICES.items())),
    )
    for key, val in FUNC_CHOICES.items():
        parser.add_argument(
            f"--{key}",
            action="store_const",
            dest="func",
            const=f"{key}",
            help=val,
        )
    dpxtools_common.Config.set_parser_options(parser)
    parser.add_argument(
        "-i",
        "--infile",
        type=str,
        dest="infile",
        default=default_values["infile"],
        metavar="input-file",
        help="input file",
    )
    parser.add_argument(
        "-o",
        "--outfile",
        type=str,
        dest="outfile",
        default=default_values["outfile"],
        metavar="output-file",
        help="output file",
    )
    parser.add_argument(
        "--logfile",
        action="store",
        dest="logfile",
        type=str,
        default=default_values["logfile"],
        metavar="log-file",
        help="log file",
    )
    # do the parsing
    options = parser.parse_args(argv[1:])
    return options


def get_logfd(options):
    if options.logfile is not None:
        return open(options.logfile, "w")
    # keep log lines out of the output when it goes to stdout
    if options.outfile == "/dev/fd/1":
        return sys.stderr
    return sys.stdout


def main(argv):
    # parse options
    options = get_options(argv)
    if options.version:
        print("version: %s" % __version__)
        return 0
    # get infile/outfile
    if options.infile == "-" or options.infile is None:
        options.infile = "/dev/fd/0"
    if options.outfile == "-" or options.outfile is None:
        if options.func == "decode":
            print("error: decode requires an output file (-o)", file=sys.stderr)
            return -1
        options.outfile = "/dev/fd/1"
    logfd = get_logfd(options)
    # print results
    if options.debug > 0:
        print(f"debug: {options}", file=logfd)
    config_dict = dpxtools_common.Config.Create(options)
    # do something
    try:
        dpx_image = dpxtools_raster.DPXImage.FromFile(
            options.infile, config_dict, logfd, options.debug
        )
        if options.func == "info":
            print_info(dpx_image, options.outfile, options.debug)
        elif options.func == "decode":
            decode_image(dpx_image, options.outfile, options.debug)
    except dpxtools_common.DPXException as e:
        print(f"error: {e}", file=sys.stderr)
        return -1
    finally:
        if options.logfile is not None:
            logfd.close()
    return 0


def console_main():
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    # at least the CLI program name: (CLI) execution
    sys.exit(main(sys.argv))
