from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Tuple

import numpy as np

from pathtracer.scene import Scene, SceneBuilder
from pathtracer.surfaces import Box, Capsule, HalfSpace, RoundedBox, Shape, Sphere
from pathtracer.typings.isometry import Isometry
from pathtracer.typings.material import Diffuse, Emissive, Material, ScatterModel


class SceneFileError(ValueError):
    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


@dataclass(frozen=True, slots=True)
class CameraParams:
    eye: np.ndarray
    target: np.ndarray
    fov: float # radians


@dataclass(frozen=True, slots=True)
class SceneDescription:
    scene: Scene
    camera: CameraParams | None
    samples_per_bounce: int | None
    max_depth: int | None


# keyword -> (argument count without the trailing material index, shape factory)
SHAPE_KEYWORDS: Dict[str, Tuple[int, Callable[[List[float]], Shape]]] = {
    "sph": (4, lambda p: Sphere(p[3])),
    "box": (6, lambda p: Box(np.asarray(p[3:6], dtype=float))),
    "cap": (10, lambda p: Capsule(np.asarray(p[3:6], dtype=float), np.asarray(p[6:9], dtype=float), p[9])),
    "rbx": (7, lambda p: RoundedBox(np.asarray(p[3:6], dtype=float), p[6])),
    "hsp": (6, lambda p: HalfSpace(np.asarray(p[3:6], dtype=float))),
}


def _floats(line_number: int, values: List[str]) -> List[float]:
    try:
        return [float(v) for v in values]
    except ValueError as exc:
        raise SceneFileError(line_number, f"expected numbers, got {' '.join(values)!r}") from exc


def _expect_count(line_number: int, keyword: str, params: List[float], *counts: int) -> None:
    if len(params) not in counts:
        expected = " or ".join(str(c) for c in counts)
        raise SceneFileError(line_number, f"'{keyword}' takes {expected} values, got {len(params)}")


def parse_scene_lines(lines: Iterable[str]) -> SceneDescription:
    """
    Parses the line-based scene format.

    Each non-blank line that does not start with '#' is a keyword followed by
    whitespace-separated values. Materials are numbered from 1 in the order
    they appear; shapes name their material by that number and may appear
    before it. Shapes are placed by the translation in their first three values.
    """
    camera: CameraParams | None = None
    background = np.zeros(3)
    background_line = 0
    samples_per_bounce: int | None = None
    max_depth: int | None = None
    materials: List[Material] = []
    placed_shapes: List[Tuple[int, Shape, Isometry, int]] = []

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        keyword = parts[0]

        if keyword == "dif":
            model = ScatterModel.UNIT
            if len(parts) == 5:
                try:
                    model = ScatterModel(parts[4])
                except ValueError as exc:
                    raise SceneFileError(line_number, f"unknown scatter model {parts[4]!r}") from exc
                parts = parts[:4]
            params = _floats(line_number, parts[1:])
            _expect_count(line_number, keyword, params, 3)
            materials.append(_material(line_number, lambda: Diffuse(np.asarray(params), model)))
            continue

        if keyword not in ("cam", "set", "emi") and keyword not in SHAPE_KEYWORDS:
            raise SceneFileError(line_number, f"unknown object type: {keyword}")

        params = _floats(line_number, parts[1:])
        if keyword == "cam":
            _expect_count(line_number, keyword, params, 7)
            camera = CameraParams(
                eye=np.asarray(params[:3], dtype=float),
                target=np.asarray(params[3:6], dtype=float),
                fov=math.radians(params[6]),
            )
        elif keyword == "set":
            _expect_count(line_number, keyword, params, 3, 5)
            background = np.asarray(params[:3], dtype=float)
            background_line = line_number
            if len(params) == 5:
                samples_per_bounce = int(params[3])
                max_depth = int(params[4])
        elif keyword == "emi":
            _expect_count(line_number, keyword, params, 3)
            materials.append(_material(line_number, lambda: Emissive(np.asarray(params))))
        else:
            count, factory = SHAPE_KEYWORDS[keyword]
            _expect_count(line_number, keyword, params, count + 1)
            try:
                isometry = Isometry.from_translation(*params[:3])
            except ValueError as exc:
                raise SceneFileError(line_number, str(exc)) from exc
            placed_shapes.append((line_number, factory(params), isometry, int(params[count])))

    builder = SceneBuilder(background=background)
    for line_number, shape, isometry, material_index in placed_shapes:
        if not (1 <= material_index <= len(materials)):
            raise SceneFileError(line_number, f"material {material_index} is not defined")
        builder.add(shape, materials[material_index - 1], isometry)

    try:
        scene = builder.build()
    except ValueError as exc:
        raise SceneFileError(background_line, f"invalid background: {exc}") from exc
    return SceneDescription(scene=scene, camera=camera, samples_per_bounce=samples_per_bounce, max_depth=max_depth)


def _material(line_number: int, factory: Callable[[], Material]) -> Material:
    try:
        return factory()
    except ValueError as exc:
        raise SceneFileError(line_number, str(exc)) from exc


def parse_scene_file(file_path: str) -> SceneDescription:
    with open(file_path, "r") as f:
        return parse_scene_lines(f)
