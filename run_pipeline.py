# run_pipeline.py
"""Extract streets, roads, administrative boundaries or tagged objects from OSM.

Source is either a PBF/XML file or, with --bbox, the Overpass API:

    python run_pipeline.py -f berlin.osm.pbf streets --name "Wilhelmstraße" --boundary 10
    python run_pipeline.py -f berlin.osm.pbf boundaries --levels 9 10 --geojson
    python run_pipeline.py --bbox "52.50,13.38,52.51,13.39" objects --tags "amenity~fountain"
"""
import argparse
import sys
from contextlib import contextmanager

import extract
import export_utils
import tag_filter
from data_fetcher import OverpassObjectLoader
from osm_reader import PbfObjectLoader
from utils import log, parse_bbox


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="OSM street & boundary extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", "-f", dest="path", metavar="PBF", help="OSM PBF (or XML) file")
    source.add_argument("--bbox", type=parse_bbox,
                        help="Fetch from Overpass instead: 'south, west, north, east'")
    p.add_argument("--output", "-o", metavar="FILE", help="Write to FILE instead of stdout")
    p.add_argument("--verbose", "-v", action="store_true", help="Print progress to stderr")

    sub = p.add_subparsers(dest="command", required=True)

    objs = sub.add_parser("objects", help="Objects matching a tag selector")
    objs.add_argument("--tags", "-t", help="Selector, e.g. 'amenity~fountain+tourism,amenity~townhall'")
    objs.add_argument("--retain-coordinates", "-r", action="store_true",
                      help="Include the coordinates of ways and relations")

    st = sub.add_parser("streets", help="Streets clustered from named ways")
    st.add_argument("--geojson", "-g", action="store_true")
    st.add_argument("--name", "-n")
    st.add_argument("--boundary", "-b", type=int, metavar="LEVEL",
                    help="Split streets along admin boundaries of this level")

    rd = sub.add_parser("roads", help="Named ways chained end to end")
    rd.add_argument("--name", "-n")

    bd = sub.add_parser("boundaries", help="Administrative boundaries")
    bd.add_argument("--geojson", "-g", action="store_true")
    bd.add_argument("--levels", "-l", type=int, nargs="+", metavar="LEVEL")

    return p.parse_args(argv)


def get_loader(args):
    if args.bbox is not None:
        return OverpassObjectLoader(args.bbox)
    return PbfObjectLoader(args.path, verbose=args.verbose)


@contextmanager
def open_output(path):
    if path is None:
        yield sys.stdout
        return
    with open(path, "w", encoding="utf-8") as f:
        yield f


def main(argv=None):
    args = parse_args(argv)
    loader = get_loader(args)
    verbose = args.verbose

    if verbose:
        source = args.path if args.path else f"Overpass bbox {args.bbox}"
        log(f"Extracting {args.command} from {source} …")

    with open_output(args.output) as out:
        if args.command == "objects":
            groups = tag_filter.parse(args.tags) if args.tags else None
            records = extract.objects(loader, groups, args.retain_coordinates)
            export_utils.write_json_lines(records, out)
        elif args.command == "streets":
            streets = extract.streets(loader, args.name, args.boundary, verbose=verbose)
            if args.geojson:
                export_utils.write_geojson(export_utils.streets_to_geodataframe(streets), out)
            else:
                export_utils.write_streets(streets, out)
        elif args.command == "roads":
            export_utils.write_roads(extract.roads(loader, args.name), out)
        elif args.command == "boundaries":
            boundaries = extract.boundaries(loader, args.levels, verbose=verbose)
            if args.geojson:
                export_utils.write_geojson(export_utils.boundaries_to_geodataframe(boundaries), out)
            else:
                export_utils.write_boundaries(boundaries, out)

    if verbose:
        log("Done.")


if __name__ == "__main__":
    main()
