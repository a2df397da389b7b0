"""Command-line interface for houghlines."""

import argparse
import logging
import sys

import matplotlib.pyplot as plt

from .core import (
    HoughConfig,
    cluster_maxima,
    detect_maxima,
    foreground_predicate,
    get_line_boundary_points,
    hough_transform,
    load_config,
    load_edge_image,
    load_photo_edges,
    reconstruct,
    save_config,
)


def build_config(args):
    """Merge a config file (if any) with command-line overrides."""
    config = load_config(args.config) if args.config else HoughConfig()
    if args.n_theta is not None:
        config.n_theta = args.n_theta
    if args.threshold is not None:
        config.threshold = args.threshold
    if args.foreground is not None:
        config.foreground = args.foreground
    if args.num_peaks is not None:
        config.num_peaks = args.num_peaks
    if args.coarsen is not None:
        config.coarsen_factor = args.coarsen
    return config


def run(image, config, clustered=False):
    """Run the full transform on a loaded image according to ``config``."""
    space = hough_transform(
        image,
        n_theta=config.n_theta,
        foreground=foreground_predicate(config.foreground),
    )
    if clustered:
        space = cluster_maxima(space, threshold=config.threshold)
        if config.num_peaks is not None:
            space.maximums = space.maximums[: config.num_peaks]
    else:
        space = detect_maxima(
            space, threshold=config.threshold, num_peaks=config.num_peaks
        )
    return reconstruct(space)


def plot_space(image, space):
    """Draw the image with detected lines next to the vote visualization."""
    fig, (ax_img, ax_votes) = plt.subplots(1, 2, figsize=(12, 5))
    ax_img.imshow(image, cmap="gray")
    ax_img.set_title(f"{len(space.rays)} lines")
    for ray in space.rays:
        d = ray.descriptor
        points = get_line_boundary_points(d.rho, d.theta, space.width, space.height)
        if len(points) == 2:
            (x1, y1), (x2, y2) = points
            ax_img.plot([x1, x2], [y1, y2], color="red", linewidth=1)
    ax_img.set_xlim(0, space.width)
    ax_img.set_ylim(space.height, 0)

    ax_votes.imshow(space.visualization.T, cmap="gray", aspect="auto")
    ax_votes.set_xlabel("theta index")
    ax_votes.set_ylabel("rho bucket")
    ax_votes.set_title("Hough space")
    for d in space.maximums:
        ax_votes.plot(d.theta_index, d.rho_bucket, "r+")
    return fig


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Detect straight lines in edge images.")
    parser.add_argument("image", help="Path to the edge image file.")
    parser.add_argument("-c", "--config", help="Path to a YAML settings file.")
    parser.add_argument("--n-theta", type=int, help="Number of angle samples.")
    parser.add_argument("--threshold", type=int, help="Minimum votes per line.")
    parser.add_argument(
        "--foreground", choices=["white", "black"], help="Colour of edge pixels."
    )
    parser.add_argument("--num-peaks", type=int, help="Keep at most this many lines.")
    parser.add_argument("--coarsen", type=int, help="Downsampling factor.")
    parser.add_argument(
        "--clustered",
        action="store_true",
        help="Keep one line per group of neighbouring maxima.",
    )
    parser.add_argument(
        "--canny",
        type=float,
        metavar="SIGMA",
        help="Treat the input as a photo and detect edges with Canny first.",
    )
    parser.add_argument("--save-config", help="Write the effective settings to YAML.")
    parser.add_argument("-o", "--output", help="Save the figure to this path.")
    parser.add_argument("--no-show", action="store_true", help="Do not open a window.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = build_config(args)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.canny is not None:
            image = load_photo_edges(args.image, args.canny, config.coarsen_factor)
            # Canny output is a bool mask, edges are True
            config.foreground = "white"
        else:
            image = load_edge_image(args.image, config.coarsen_factor)
    except Exception as e:
        print(f"Error loading image: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        space = run(image, config, clustered=args.clustered)
    except ValueError as e:
        print(f"Error detecting lines: {e}", file=sys.stderr)
        sys.exit(1)

    for ray in space.rays:
        d = ray.descriptor
        print(
            f"theta={d.theta_index} ({d.theta:.4f} rad) rho={d.rho:+.0f} "
            f"votes={d.votes} ({ray.x1:.1f}, {ray.y1:.1f}) -> ({ray.x2:.1f}, {ray.y2:.1f})"
        )

    if args.save_config:
        save_config(config, args.save_config)
        print(f"Settings saved to {args.save_config}")

    fig = plot_space(image, space)
    if args.output:
        fig.savefig(args.output)
    if not args.no_show:
        plt.show()


if __name__ == "__main__":
    main()
