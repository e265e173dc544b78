#!/usr/bin/env python3
import logging
import sys
import time

import image_codec
from filter_errors import MeanFilterError
from mean_filter import METHODS, apply_mean_filter, check_parameters

DEFAULT_OUTPUT = "filtered_output.jpg"
DEFAULT_KERNEL_SIZE = 7
DEFAULT_WORKERS = 4


def usage():
    print(f"Usage: {sys.argv[0]} <input_image> [<output_image> [<kernel_size> [<workers>]]] [--method METHOD] [--verbose]")
    print(f"Methods: {', '.join(METHODS)}")
    print(f"Defaults: output {DEFAULT_OUTPUT}, kernel size {DEFAULT_KERNEL_SIZE}, {DEFAULT_WORKERS} workers")


def parse_args(argv):
    args = list(argv)
    method = "direct"
    if "--method" in args:
        i = args.index("--method")
        if i + 1 >= len(args):
            raise ValueError("--method needs a value")
        method = args[i + 1].lower()
        del args[i:i + 2]
        if method not in METHODS:
            raise ValueError(f"Unknown method: {method}")

    if not 1 <= len(args) <= 4:
        raise ValueError("expected between 1 and 4 positional arguments")

    input_path = args[0]
    output_path = args[1] if len(args) > 1 else DEFAULT_OUTPUT
    kernel_size = int(args[2]) if len(args) > 2 else DEFAULT_KERNEL_SIZE
    num_workers = int(args[3]) if len(args) > 3 else DEFAULT_WORKERS
    return input_path, output_path, kernel_size, num_workers, method


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    verbose = "--verbose" in argv
    argv = [a for a in argv if a != "--verbose"]
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    try:
        input_path, output_path, kernel_size, num_workers, method = parse_args(argv)
    except ValueError as exc:
        print(exc)
        usage()
        return 1

    try:
        check_parameters(kernel_size, num_workers)

        # Load image
        start_time = time.time()
        image = image_codec.decode(input_path)
        load_time = time.time() - start_time
        print(f"Image loading took {load_time * 1000:.2f}ms")

        # Apply filter
        start_time = time.time()
        filtered = apply_mean_filter(image, kernel_size, num_workers, method=method)
        filter_time = time.time() - start_time
        print(f"Mean filter processing took {filter_time * 1000:.2f}ms")

        # Save image
        start_time = time.time()
        image_codec.encode(filtered, output_path)
        save_time = time.time() - start_time
        print(f"Image saving took {save_time * 1000:.2f}ms")
    except MeanFilterError as exc:
        print(f"Error processing image: {exc}", file=sys.stderr)
        return 1

    total_time = load_time + filter_time + save_time
    print(f"Total time: {total_time * 1000:.2f}ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
