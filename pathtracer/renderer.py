from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Sequence, Tuple

import numpy as np
from PIL import Image
from tqdm import tqdm

from pathtracer.camera import Camera
from pathtracer.render_settings import RenderSettings
from pathtracer.scene import Scene
from pathtracer.typings.ray import Ray
from pathtracer.utils.sampling import pixel_rng
from pathtracer.utils.vector_operations import color_to_uint8

logger = logging.getLogger(__name__)

# (row-major pixel index, primary ray, writable view of that pixel's cell)
PixelTask = Tuple[int, Ray, np.ndarray]


def estimate_pixel(scene: Scene, ray: Ray, settings: RenderSettings, pixel_index: int) -> np.ndarray:
    rng = pixel_rng(settings.seed, pixel_index)
    return scene.estimate_radiance(ray, settings.samples_per_bounce, settings.max_depth, rng)


def partition_pixels(camera: Camera, chunk_size: int) -> List[List[PixelTask]]:
    """Splits the camera's rays into contiguous runs of at most `chunk_size` pixels.

    Chunks are formed before any work starts and never share a pixel cell.
    """
    chunks: List[List[PixelTask]] = []
    current: List[PixelTask] = []
    for pixel_index, (ray, pixel) in enumerate(camera.generate_rays()):
        current.append((pixel_index, ray, pixel))
        if len(current) == chunk_size:
            chunks.append(current)
            current = []
    if current:
        chunks.append(current)
    return chunks


def _render_chunk(scene: Scene, chunk: Sequence[PixelTask], settings: RenderSettings) -> int:
    for pixel_index, ray, pixel in chunk:
        pixel[:] = estimate_pixel(scene, ray, settings, pixel_index)
    logger.debug("Rendered pixels %d-%d", chunk[0][0], chunk[-1][0])
    return len(chunk)


def render(scene: Scene, camera: Camera, settings: RenderSettings, progress: bool = False) -> np.ndarray:
    """Fill the camera's pixel buffer with radiance estimates and return it.

    Each chunk of pixels is one task. With `settings.workers == 1` the tasks
    run inline on the calling thread; otherwise they run on a thread pool and
    this call returns once all of them have finished. Exceptions raised by a
    task propagate to the caller.
    """
    chunks = partition_pixels(camera, settings.chunk_size)
    total_pixels = sum(len(chunk) for chunk in chunks)
    logger.info(
        "Rendering %dx%d: %d objects, %d chunks, workers=%s, samples_per_bounce=%d, max_depth=%d, seed=%d",
        camera.width,
        camera.height,
        len(scene),
        len(chunks),
        settings.workers if settings.workers is not None else "auto",
        settings.samples_per_bounce,
        settings.max_depth,
        settings.seed,
    )

    render_start = time.perf_counter()
    with tqdm(total=total_pixels, unit="px", disable=not progress) as progress_bar:
        if settings.workers == 1:
            for chunk in chunks:
                progress_bar.update(_render_chunk(scene, chunk, settings))
        else:
            with ThreadPoolExecutor(max_workers=settings.workers) as executor:
                futures = [executor.submit(_render_chunk, scene, chunk, settings) for chunk in chunks]
                for future in as_completed(futures):
                    progress_bar.update(future.result())

    logger.info("Rendered %d pixels in %.2fs", total_pixels, time.perf_counter() - render_start)
    return camera.image


def to_uint8_image(image_array: np.ndarray, exposure: float = 1.0) -> np.ndarray:
    """Linear radiance scaled by `exposure`, clamped and quantized to 8 bits per channel."""
    return color_to_uint8(np.asarray(image_array, dtype=float) * exposure)


def save_image(image_array: np.ndarray, output_path: str, exposure: float = 1.0) -> None:
    image = Image.fromarray(to_uint8_image(image_array, exposure))
    image.save(output_path)
