"""
Script-like code for converting geometries between encodings.
"""

# Copyright 2026 The numcoll Authors
#
# This file is part of numcoll.
#
# numcoll is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# numcoll is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with numcoll.  If not, see <https://www.gnu.org/licenses/>.

__version__ = "0.0.1a0"
__author__ = "The numcoll Authors"
__all__ = ["process"]


##############################################################################
# IMPORT                                                                     #
##############################################################################

# Record time.
import time
if __name__ == "__main__":
    script_time0 = time.time()
else:
    script_time0 = None

# Import.
import numcoll.coll
import numcoll.geom
import numcoll.transform
import numcoll.util
import os
import re
import sys
import warnings



###############################################################################
# LOCALIZATION                                                                #
###############################################################################

OUT_FORMATS = ("WKT", "WKB", "GML2", "GML3", "JSON", "KML")
_out_format_to_ext = {"WKT": ".wkt", "WKB": ".wkb.txt", "GML2": ".gml",
                      "GML3": ".gml", "JSON": ".geojson", "KML": ".kml"}
_hex_re = re.compile("^[0-9A-Fa-f]+$")



###############################################################################
# FUNCTIONS                                                                   #
###############################################################################

def process(
    # Path to input text file (one WKT or hex-encoded WKB geometry per
    # line).
    in_path,

    # Output paths.
    out_path=None,  # converted geometries
    log_out_path=None,  # text file

    # Conversion options.
    out_format="WKT",  # WKT, WKB (hex), GML2, GML3, JSON, or KML
    precision=None,  # digits after decimal point (None --> exact)
    src_crs=None,  # e.g., "EPSG:4326" (None --> no reprojection)
    dst_crs=None,  # e.g., "EPSG:3857" (None --> no reprojection)
    transform_z=False,  # Also transform z-coordinates?
    duplicate_tolerance=None,  # None --> keep duplicate nodes

    # Output options.
    output_log=True,  # Output sidecar text file?
    print_log=True,  # Print log to screen?
    ):
    """
    Convert geometries between encodings.

    Every line of the input file that is neither blank nor a comment
    (starting with "#") is decoded as WKT or, if it consists only of
    hexadecimal digits, as hex-encoded WKB. The decoded geometries become
    the parts of a single GeometryCollection, which is optionally
    reprojected and cleaned of duplicate nodes before being written out.
    Lines that cannot be decoded are skipped with a warning.

    in_path is a string that specifies the path to the input text file.

    out_path is a string that specifies the path to the output file. If
    out_path is None, it is derived from in_path and out_format (e.g.,
    "in_converted.wkt").

    log_out_path is a string that specifies the path to the log file. If
    log_out_path is None, it is derived from in_path (e.g., "in_log.txt").
    The log is formatted so that it can be reused as a settings file by
    process.external().

    out_format is a string that specifies the output encoding. It may be any
    of "WKT", "WKB" (hex-encoded), "GML2", "GML3", "JSON" (GeoJSON), or "KML".

    precision is an integer that specifies the maximum number of digits after
    the decimal point in text output. If precision is None, the shortest text
    that round-trips exactly is written.

    src_crs and dst_crs are strings (or anything else accepted by pyproj)
    that specify the coordinate reference systems between which the
    geometries are transformed. Both or neither must be specified.

    transform_z is a boolean that specifies whether z-coordinates are also
    transformed.

    duplicate_tolerance is a float that specifies the tolerance within which
    consecutive vertices are considered duplicates (and removed). If
    duplicate_tolerance is None, duplicate nodes are kept.

    output_log is a boolean that specifies whether a log file is written.

    print_log is a boolean that specifies whether the log is printed to
    stdout.

    The converted GeometryCollection is returned.

    See also:
        process.external():
            Similar function that accepts an external settings file.
    """
    # Store calling arguments.
    orig_kwargs = locals().copy()
    final_kwargs = orig_kwargs.copy()

    # Validate options.
    out_format = numcoll.util.validate_string_option(
        out_format, "out_format", OUT_FORMATS
        )
    final_kwargs["out_format"] = out_format
    if (src_crs is None) != (dst_crs is None):
        raise TypeError("src_crs and dst_crs must both be specified or both "
                        "be None")

    # Derive unspecified output paths.
    base = os.path.splitext(in_path)[0]
    if out_path is None:
        final_kwargs["out_path"] = "{}_converted{}".format(
            base, _out_format_to_ext[out_format]
            )
    if log_out_path is None:
        final_kwargs["log_out_path"] = "{}_log.txt".format(base)

    # Call main function.
    return _process(orig_kwargs, **final_kwargs)

def _process_external(settings_path, **kwargs):
    """
    Convert geometries between encodings.

    settings_path is a string that specifies the path to a file from which
    default settings will be read. For example, if settings_path is the log
    outputted by a previous call and no (overriding) arguments are specified,
    the exact same processing as created the log will be repeated.

    All remaining arguments are as documented in process().
    """
    final_kwargs = numcoll.util.read_settings(settings_path)
    final_kwargs.update(kwargs)
    return process(**final_kwargs)
process.external = _process_external

def _decode_line(line):
    """
    Decode a line of text as hex-encoded WKB or as WKT.

    Raises a TypeError if the line cannot be decoded.
    """
    if _hex_re.match(line) is not None:
        return numcoll.geom.from_wkb(line)
    return numcoll.geom.from_wkt(line)

def _encode(collection, out_format, precision):
    if out_format == "WKB":
        return collection.as_wkb().hex()
    if out_format == "WKT":
        return collection.as_wkt(precision)
    if out_format == "GML2":
        return collection.as_gml2(precision)
    if out_format == "GML3":
        return collection.as_gml3(precision)
    if out_format == "JSON":
        return collection.as_json(precision)
    return collection.as_kml(precision)

def _process(orig_kwargs, in_path, out_path, log_out_path, out_format,
             precision, src_crs, dst_crs, transform_z, duplicate_tolerance,
             output_log, print_log):

    # Store calling argument values.
    process_kwargs = locals().copy()
    del process_kwargs["orig_kwargs"]

    # Remember start time.
    time0 = time.time() if script_time0 is None else script_time0

    # Write out settings to log file and/or stdout (or neither).
    if not output_log:
        log_out_path = os.devnull
    with open(log_out_path, "w") as log:
        logger = numcoll.util.LogPrintTiming(log, print_log)
        logger.write_kwargs(process_kwargs, process)
        logger.write_untimed('\n"""\nLog...')
        logger.start("overall_processing",
                     addendum=" (reading + conversion + writing out)",
                     time=time0)

        # Read in each geometry.
        logger.start("reading")
        collection = numcoll.coll.GeometryCollection()
        skipped_count = 0
        with open(in_path) as in_file:
            for line_number, line in enumerate(in_file, 1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                try:
                    geom = _decode_line(line)
                except TypeError as e:
                    warnings.warn(
                        "line {} of {} could not be decoded and was skipped: "
                        "{}".format(line_number, in_path, e)
                        )
                    skipped_count += 1
                    continue
                collection.add_geometry(geom)
        logger.end("reading", collection, " ({} parts, {} skipped)".format(
            collection.num_geometries, skipped_count
            ))

        # Optionally reproject.
        if src_crs is not None:
            logger.start("reprojecting", collection)
            transformer = numcoll.transform.ProjTransformer(src_crs, dst_crs)
            if not collection.transform(transformer, "FORWARD", transform_z):
                raise numcoll.transform.TransformError(
                    "geometries could not be transformed from {!r} to "
                    "{!r}".format(src_crs, dst_crs)
                    )
            logger.end("reprojecting", collection)

        # Optionally remove duplicate nodes.
        if duplicate_tolerance is not None:
            logger.start("removing_duplicate_nodes", collection)
            changed = collection.remove_duplicate_nodes(duplicate_tolerance)
            logger.end("removing_duplicate_nodes", collection,
                       "" if changed else " (none found)")

        # Write out converted geometries.
        logger.start("writing_out", collection)
        with open(out_path, "w") as out_file:
            out_file.write(_encode(collection, out_format, precision))
            out_file.write("\n")
        logger.end("writing_out", collection)

        # End.
        logger.end("overall_processing",
                   addendum=" (reading + conversion + writing out)")
        logger.write_untimed('"""')
    return collection



###############################################################################
# SCRIPT SUPPORT                                                              #
###############################################################################

# Optionally execute module as script.
if __name__ == "__main__":
    process.external(*sys.argv[1:])
