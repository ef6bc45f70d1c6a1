import sys
import time
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

from mandelgrid import DEFAULT_MAX_ITERATIONS, FractalSession, format_pgm, write_image, write_pgm
from mandelgrid.pgm import PNG_MAX_VALUE, pillow_format

_VERBOSE_FLAGS = {"--verbose", "-v"}
VERBOSE = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, file=sys.stderr, **kwargs)


@dataclass
class OutputConfig:
    path: Path | None
    image_format: str


def build_parser():
    parser = ArgumentParser(description="Compute Mandelbrot escape scores and dump them as a PGM image.")

    parser.add_argument('--width', type=int,
                        dest='width', help='number of pixel columns in the viewport',
                        metavar='WIDTH', default=150)

    parser.add_argument('--height', type=int,
                        dest='height', help='number of pixel rows in the viewport',
                        metavar='HEIGHT', default=150)

    parser.add_argument('--x-center', type=float,
                        dest='x_center', help='real part of the viewport center',
                        metavar='X_CENTER', default=-0.5)

    parser.add_argument('--y-center', type=float,
                        dest='y_center', help='imaginary part of the viewport center',
                        metavar='Y_CENTER', default=0.0)

    parser.add_argument('--zoom', type=int,
                        dest='zoom', help='each pixel spans 1/2**ZOOM units of the complex plane',
                        metavar='ZOOM', default=6)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration bound; points that have not escaped score this value',
                        metavar='MAX_ITERATIONS', default=DEFAULT_MAX_ITERATIONS)

    parser.add_argument('--naive', action='store_true',
                        help='score every pixel directly instead of using the Mariani/Silver algorithm')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination file. ".pgm" writes plain PGM text, other extensions go through Pillow. '
                             'Defaults to PGM text on stdout.')

    parser.add_argument('--format', type=str,
                        dest='format', help='Pillow format for --output, overriding the extension (e.g. "png", "tiff").',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Report timing and scorer evaluations on stderr.')

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.max_iterations < 1:
        parser.error("--max-iterations must be at least 1.")

    output_arg = getattr(opt, "output", None)
    format_arg = getattr(opt, "format", None)
    if not output_arg:
        if format_arg and format_arg.lower().lstrip(".") != "pgm":
            parser.error("--format requires --output unless it is pgm.")
        return OutputConfig(path=None, image_format="pgm")

    output_path = Path(output_arg).expanduser()
    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")

    image_format = (format_arg or output_path.suffix or "pgm").lower().lstrip(".")
    if not image_format:
        image_format = "pgm"

    suffix = output_path.suffix
    if suffix:
        if suffix.lower().lstrip(".") != image_format:
            parser.error(f"--output extension {suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(f".{image_format}")

    if image_format != "pgm":
        pil_format = pillow_format(image_format)
        if pil_format is None:
            parser.error(f"Unsupported output format '{image_format}'. Use pgm or an image format Pillow can save.")
        if pil_format == "PNG" and opt.max_iterations > PNG_MAX_VALUE:
            parser.error(f"PNG output holds at most {PNG_MAX_VALUE} iterations; lower --max-iterations or use tiff.")

    return OutputConfig(path=output_path.resolve(), image_format=image_format)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    output_config = resolve_output_config(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    with FractalSession(opt.width, opt.height, max_iterations=opt.max_iterations) as fractal:
        fractal.set_position((opt.x_center, opt.y_center), opt.zoom)
        log("viewport %dx%d centered at (%s, %s), resolution %s" % (
            opt.width, opt.height, opt.x_center, opt.y_center, fractal.resolution))

        started = time.perf_counter()
        stats = fractal.generate() if opt.naive else fractal.fast_generate()
        elapsed = time.perf_counter() - started

        log("%s generation took %.3fs: %d evaluations, %d filled pixels" % (
            "naive" if opt.naive else "accelerated", elapsed, stats.evaluations, stats.filled))

        scores = fractal.get_scores()

        if output_config.path is None:
            sys.stdout.write(format_pgm(scores, fractal.max_iterations))
        elif output_config.image_format == "pgm":
            write_pgm(scores, fractal.max_iterations, output_config.path)
            log("wrote %s" % output_config.path)
        else:
            write_image(scores, output_config.path, output_config.image_format)
            log("wrote %s" % output_config.path)


if __name__ == '__main__':
    main()
