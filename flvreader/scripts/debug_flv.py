import argparse
import logging
import sys
from pprint import pprint

import coloredlogs

from flvreader import __version__
from flvreader.errors import FLVError, FLVIOError
from flvreader.tags import FLV, ScriptTag

logger = logging.getLogger('flvreader.debug-flv')

VERBOSITY_TO_LEVEL = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG
}


def debug_file(filename, quiet=False, metadata=False, strict=False):
    try:
        flv = FLV.open(filename, strict=strict)
    except FLVIOError as e:
        logger.error('Failed to open "%s": %s', filename, e)
        return False

    if not quiet:
        print('=== "%s" ===' % filename)

    with flv:
        try:
            for i, tag in enumerate(flv.iter_tags()):
                if quiet:
                    # If we're quiet, we just want to catch errors
                    continue
                # Print the tag information
                print('#%05d %s' % (i + 1, tag))
                # Print the content of onMetaData tags
                if isinstance(tag, ScriptTag) and tag.name == b'onMetaData':
                    pprint(tag.variable)
                    if metadata:
                        return True
        except FLVIOError as e:
            logger.error('Unexpected end of file on file "%s": %s', filename, e)
            return False
        except FLVError as e:
            logger.error('The file "%s" is not a valid FLV file: %s', filename, e)
            return False

    return True


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='debug-flv',
        description=(
            'Checks FLV files for conformance with the FLV '
            'specification. Outputs a list of tags and, '
            'if present, the content of the onMetaData script tag.'
        )
    )
    parser.add_argument('--version', action='version', version='%(prog)s flvreader ' + __version__)
    parser.add_argument('files', nargs='+', metavar='FILE', help='FLV files to check')
    parser.add_argument('--strict', '-s', action='store_true', help='be strict while parsing the FLV file')
    parser.add_argument(
        '--quiet', '-q', action='store_true', help='do not output anything unless there are errors'
    )
    parser.add_argument(
        '--metadata', '-m', action='store_true', help='exit immediately after printing an onMetaData tag'
    )
    parser.add_argument(
        '--verbose', '-v', action='count', default=0, dest='verbosity',
        help='be more verbose, each -v increases verbosity'
    )
    return parser.parse_args(argv)


def debug_files(argv=None):
    args = parse_args(argv)

    level = VERBOSITY_TO_LEVEL[min(args.verbosity, 3)]
    coloredlogs.install(level=level, logger=logging.getLogger('flvreader'))

    clean_run = True

    for filename in args.files:
        if not debug_file(filename, args.quiet, args.metadata, args.strict):
            clean_run = False

    return clean_run


def main():
    try:
        outcome = debug_files()
    except KeyboardInterrupt:
        # give the right exit status, 128 + signal number
        # signal.SIGINT = 2
        sys.exit(128 + 2)

    if outcome:
        sys.exit(0)
    else:
        sys.exit(1)


if __name__ == '__main__':
    main()
