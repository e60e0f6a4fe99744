import argparse
import logging
import time
from typing import List

from pathtracer.camera import Camera
from pathtracer.render_settings import RenderSettings
from pathtracer.renderer import render, save_image
from pathtracer.scene_parser import CameraParams, SceneDescription, SceneFileError, parse_scene_file

logger = logging.getLogger("pathtracer")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level.upper(), logging.INFO))


def log_phase(label: str, seconds: float) -> None:
    logger.info("[phase] %s: %.2fs", label, seconds)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Monte-Carlo path tracer')
    parser.add_argument('scene_file', type=str, help='Path to the scene file')
    parser.add_argument('output_image', type=str, help='Name of the output image file')
    parser.add_argument('--width', type=int, default=500, help='Image width')
    parser.add_argument('--height', type=int, default=500, help='Image height')
    parser.add_argument('--samples', type=int, default=None, help='Rays per first bounce (overrides the scene file)')
    parser.add_argument('--max-depth', type=int, default=None, help='Maximum bounces per path (overrides the scene file)')
    parser.add_argument('--seed', type=int, default=0, help='Seed of the per-pixel random streams')
    parser.add_argument('--workers', type=int, default=None, help='Render threads (1 renders on the main thread)')
    parser.add_argument('--chunk-size', type=int, default=256, help='Pixels per render task')
    parser.add_argument('--exposure', type=float, default=1.0, help='Linear scale applied before 8-bit quantization')
    parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')
    parser.add_argument('--log-level', type=str, default='INFO', help='Logging level')
    return parser


def _build_camera(params: CameraParams | None, width: int, height: int) -> Camera:
    if params is None:
        logger.warning("Scene file has no camera ('cam' line), using the default view")
        default_camera = Camera.default()
        return Camera(default_camera.isometry, default_camera.fov, width, height)
    return Camera.face_towards(params.eye, params.target, params.fov, width, height)


def _build_settings(description: SceneDescription, args: argparse.Namespace) -> RenderSettings:
    """Command-line tunables win over the scene file's 'set' line, which wins over the defaults."""
    defaults = RenderSettings()
    samples = args.samples if args.samples is not None else description.samples_per_bounce
    max_depth = args.max_depth if args.max_depth is not None else description.max_depth
    return RenderSettings(
        samples_per_bounce=samples if samples is not None else defaults.samples_per_bounce,
        max_depth=max_depth if max_depth is not None else defaults.max_depth,
        seed=args.seed,
        workers=args.workers,
        chunk_size=args.chunk_size,
    )


def main(argv: List[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    parse_start = time.perf_counter()
    try:
        description = parse_scene_file(args.scene_file)
    except SceneFileError as exc:
        parser.error(f"{args.scene_file}: {exc}")
    log_phase("parse_scene", time.perf_counter() - parse_start)

    try:
        camera = _build_camera(description.camera, args.width, args.height)
        settings = _build_settings(description, args)
    except ValueError as exc:
        parser.error(str(exc))

    render_start = time.perf_counter()
    image_array = render(description.scene, camera, settings, progress=not args.no_progress)
    log_phase("render", time.perf_counter() - render_start)

    save_start = time.perf_counter()
    save_image(image_array, args.output_image, exposure=args.exposure)
    log_phase("save_image", time.perf_counter() - save_start)


if __name__ == '__main__':
    program_start = time.time()
    readable_start = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_start))
    print(f"[timer] Program started at {readable_start}")
    try:
        main()
    finally:
        program_end = time.time()
        readable_end = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_end))
        elapsed = program_end - program_start
        print(f"[timer] Program ended at {readable_end} (elapsed {elapsed:.2f}s)")
