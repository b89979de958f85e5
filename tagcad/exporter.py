"""
Export pipeline - regenerate, validate and write model geometry.

Writes STL or STEP through build123d and records a per-model result
that can be collected into a JSON manifest.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union
import json
import logging
import time

from build123d import export_step, export_stl

from .model_base import ModelBase
from .quality_gate import ValidationResult, validate_shape


logger = logging.getLogger(__name__)


class ExportFormat(Enum):
    STL = "stl"
    STEP = "step"

    @property
    def suffix(self) -> str:
        return '.stl' if self is ExportFormat.STL else '.step'

    @classmethod
    def from_path(cls, path: Path) -> 'ExportFormat':
        suffix = Path(path).suffix.lower()
        if suffix in ('.stp', '.step'):
            return cls.STEP
        return cls.STL


class GenerationStatus(Enum):
    """Status of file generation."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """Result of one export attempt."""
    status: GenerationStatus
    model_name: str
    output_path: Optional[Path]
    params_used: dict
    validation_result: Optional[ValidationResult]
    error_message: Optional[str]
    generation_time_ms: float
    size_bytes: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            'status': self.status.value,
            'name': self.model_name,
            'output_path': str(self.output_path) if self.output_path else None,
            'params': dict(self.params_used),
            'is_valid': (
                self.validation_result.is_valid
                if self.validation_result else False
            ),
            'warnings': (
                list(self.validation_result.warnings)
                if self.validation_result else []
            ),
            'error': self.error_message,
            'generation_time_ms': self.generation_time_ms,
            'size': self.size_bytes,
        }


def export_model(
    model: ModelBase,
    output_path: Path,
    fmt: Union[ExportFormat, str, None] = None,
) -> GenerationResult:
    """
    Export a model's geometry to a file.

    Pipeline:
    1. Regenerate geometry from current params
    2. Validate shape
    3. Export STL/STEP

    Failures are returned in the result rather than raised.
    """
    start_time = time.perf_counter()
    output_path = Path(output_path)
    fmt = ExportFormat(fmt) if fmt is not None else ExportFormat.from_path(output_path)

    def failed(message: str, validation: Optional[ValidationResult] = None) -> GenerationResult:
        logger.error(f"{model.name}: {message}")
        return GenerationResult(
            status=GenerationStatus.FAILED,
            model_name=model.name,
            output_path=None,
            params_used=dict(model.params),
            validation_result=validation,
            error_message=message,
            generation_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    # Stage 1: Build geometry
    try:
        geometry = model.regenerate()
    except NotImplementedError:
        raise
    except Exception as e:
        return failed(f"Geometry construction failed: {e}")

    # Stage 2: Validate shape
    validation_result = validate_shape(geometry)
    if not validation_result.is_valid:
        return failed(f"Shape validation failed: {validation_result.errors}", validation_result)

    # Stage 3: Export
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if fmt is ExportFormat.STEP:
            export_step(geometry, str(output_path))
        else:
            export_stl(geometry, str(output_path))
    except Exception as e:
        return failed(f"{fmt.value.upper()} export failed: {e}", validation_result)

    if not output_path.exists():
        return failed(f"{fmt.value.upper()} export wrote no file", validation_result)

    logger.info(f"{fmt.value.upper()} exported to: {output_path}")

    return GenerationResult(
        status=GenerationStatus.SUCCESS,
        model_name=model.name,
        output_path=output_path,
        params_used=dict(model.params),
        validation_result=validation_result,
        error_message=None,
        generation_time_ms=(time.perf_counter() - start_time) * 1000,
        size_bytes=output_path.stat().st_size,
    )


def batch_generate(
    models: Iterable[ModelBase],
    output_dir: Path,
    fmt: Union[ExportFormat, str] = ExportFormat.STL,
) -> List[GenerationResult]:
    """Export multiple models, one file per model named after it."""
    fmt = ExportFormat(fmt)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    models = list(models)
    results = []
    for i, model in enumerate(models):
        output_path = output_dir / f"{model.name}{fmt.suffix}"
        result = export_model(model, output_path, fmt)
        results.append(result)

        logger.info(
            f"[{i+1}/{len(models)}] {model.name}: {result.status.value} "
            f"({result.generation_time_ms:.1f}ms)"
        )

    success = sum(1 for r in results if r.status == GenerationStatus.SUCCESS)
    logger.info(f"Batch complete: {success}/{len(results)} success")

    return results


def save_manifest(results: List[GenerationResult], manifest_path: Path) -> dict:
    """Save generation results to a JSON manifest and return its content."""
    manifest = {
        'generated': datetime.now().isoformat(),
        'count': sum(1 for r in results if r.status == GenerationStatus.SUCCESS),
        'total': len(results),
        'models': [r.to_dict() for r in results],
    }

    manifest_path = Path(manifest_path)
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    with open(manifest_path, 'w', encoding='utf-8') as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)

    return manifest
