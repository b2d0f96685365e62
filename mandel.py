import os
import sys
import threading
import warnings

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from argparse import ArgumentParser

from mandelbarf import (
    BACKENDS,
    REFERENCE_VIEWPORT,
    ConfigurationError,
    RenderParameters,
    Viewport,
    render,
    write_png,
)


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set to a PNG using supersampling and a pool of worker threads.')

    parser.add_argument('--cols', type=int,
                        dest='cols', help='width of the output image in pixels',
                        metavar='COLS', default=1536)

    parser.add_argument('--rows', type=int,
                        dest='rows', help='height of the output image in pixels',
                        metavar='ROWS', default=1024)

    parser.add_argument('--scale', type=int,
                        dest='scale', help='supersampling factor along each axis; the image is rendered at COLS*SCALE x ROWS*SCALE and box-filtered down',
                        metavar='SCALE', default=6)

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of worker threads rendering row chunks (default: CPU count)',
                        metavar='WORKERS', default=os.cpu_count() or 1)

    parser.add_argument('--chunks', type=int,
                        dest='chunks', help='number of row chunks the supersampled image is split into',
                        metavar='CHUNKS', default=100)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration cap per point; also the brightest color value',
                        metavar='MAX_ITERATIONS', default=255)

    parser.add_argument('--escape-radius', type=float,
                        dest='escape_radius', help='magnitude past which an orbit counts as escaped',
                        metavar='ESCAPE_RADIUS', default=100.0)

    parser.add_argument('--real-min', type=float, dest='real_min', metavar='REAL_MIN',
                        default=REFERENCE_VIEWPORT.real_min, help='left edge of the viewport')
    parser.add_argument('--real-max', type=float, dest='real_max', metavar='REAL_MAX',
                        default=REFERENCE_VIEWPORT.real_max, help='right edge of the viewport')
    parser.add_argument('--imag-min', type=float, dest='imag_min', metavar='IMAG_MIN',
                        default=REFERENCE_VIEWPORT.imag_min, help='bottom edge of the viewport')
    parser.add_argument('--imag-max', type=float, dest='imag_max', metavar='IMAG_MAX',
                        default=REFERENCE_VIEWPORT.imag_max, help='top edge of the viewport')

    parser.add_argument('--lock-aspect', action='store_true',
                        help='Resize the imaginary range so that imag extent = real extent * (rows/cols) to avoid stretching.')

    parser.add_argument('--backend', choices=BACKENDS, default='tensorflow',
                        help='"tensorflow" evaluates whole row chunks at once; "python" evaluates pixel by pixel.')

    parser.add_argument('--output', dest='output', type=str, default='out.png',
                        help='Destination PNG file.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_parameters(opt, parser):
    viewport = Viewport(
        real_min=opt.real_min,
        real_max=opt.real_max,
        imag_min=opt.imag_min,
        imag_max=opt.imag_max,
    )
    try:
        if opt.lock_aspect:
            viewport = viewport.lock_aspect(opt.cols, opt.rows)
        params = RenderParameters(
            cols=opt.cols,
            rows=opt.rows,
            scale=opt.scale,
            workers=opt.workers,
            chunks=opt.chunks,
            max_iterations=opt.max_iterations,
            escape_radius=opt.escape_radius,
            viewport=viewport,
            backend=opt.backend,
        )
        params.validate()
    except ConfigurationError as exc:
        parser.error(str(exc))
    return params


class ChunkProgress:
    """Print "chunk i out of n" as worker threads finish chunks."""

    def __init__(self, total):
        self.total = total
        self.done = 0
        self._lock = threading.Lock()

    def __call__(self, row_range):
        with self._lock:
            self.done += 1
            print("chunk {0} out of {1}".format(self.done, self.total), end='\r')


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params = resolve_parameters(opt, parser)
    width, height = params.supersampled_size
    log("TensorFlow version: %s" % tf.__version__)
    log("rendering %dx%d (%dx supersampled from %dx%d) with %d workers over %d chunks"
        % (width, height, params.scale, params.cols, params.rows, params.workers, params.chunks))
    log("viewport: real [%g, %g], imag [%g, %g]" % (
        params.viewport.real_min, params.viewport.real_max,
        params.viewport.imag_min, params.viewport.imag_max))

    image = render(params, on_chunk=ChunkProgress(params.chunks))
    print()

    try:
        write_png(image, opt.output)
    except OSError as exc:
        print(f"could not write {opt.output}: {exc}", file=sys.stderr)
        return 1
    log("wrote %s" % os.path.abspath(opt.output))
    return 0


if __name__ == '__main__':
    sys.exit(main())
