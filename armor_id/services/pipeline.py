"""Per-frame armor number identification pipeline."""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Sequence
import contextvars
import logging

import numpy as np

from ..config.settings import Config
from ..core.entities import ArmorCandidate, FrameResult
from ..core.logging_config import FrameContext
from ..core.performance import StageStats, StageSummary, StageTimer
from .classifier import NumberClassifier
from .rectifier import NumberRectifier
from .template_manager import DigitTemplates

logger = logging.getLogger(__name__)


class NumberIdentificationPipeline:
    """Rectifies and classifies the armor candidates of one frame per call.

    Calls are synchronous. Frames are independent of each other, and the
    template set is read-only after construction.
    """

    def __init__(self, cfg: Config, templates: Optional[DigitTemplates] = None):
        """
        Args:
            cfg: identification settings
            templates: preloaded digit templates, loaded from ``cfg.template_dir`` when omitted

        Raises:
            ConfigurationError: if the templates cannot be loaded
        """
        self.cfg = cfg
        self.templates = templates if templates is not None else DigitTemplates.load(cfg.template_dir)
        self.rectifier = NumberRectifier.from_config(cfg)
        self.classifier = NumberClassifier.from_config(self.templates, cfg)
        self.stats = StageStats()
        self._executor: Optional[ThreadPoolExecutor] = None
        if cfg.parallel_workers > 0:
            self._executor = ThreadPoolExecutor(max_workers=cfg.parallel_workers,
                                                thread_name_prefix="armor-id")
        logger.info(
            f"Number identification ready: {len(self.templates)} templates, "
            f"threshold {cfg.confidence_threshold}, workers {cfg.parallel_workers}"
        )

    def _map(self, fn, items):
        if self._executor is None or len(items) < 2:
            return map(fn, items)
        # Workers log under the caller's frame id; Executor.map keeps submission order
        ctx = contextvars.copy_context()
        return self._executor.map(lambda item: ctx.copy().run(fn, item), items)

    def process(self, frame: np.ndarray, armors: Sequence[ArmorCandidate],
                frame_id: Optional[str] = None) -> FrameResult:
        """Identify the digits of one frame's armor candidates.

        Args:
            frame: full camera frame
            armors: candidates from light matching, in any order
            frame_id: id attached to log records, generated when omitted

        Returns:
            FrameResult with surviving armors in input order and every dropped
            armor with its rejection reason

        Raises:
            FrameError: if ``frame`` is not a usable image
        """
        armors = list(armors)
        with FrameContext(frame_id) as fid, StageTimer("frame", self.stats) as frame_timer:
            with StageTimer("rectify", self.stats):
                rectified, degenerate = self.rectifier.extract_numbers(frame, armors, mapper=self._map)
            with StageTimer("classify", self.stats):
                batch = self.classifier.classify(rectified, mapper=self._map)

            if degenerate or batch.rejected:
                logger.debug(
                    f"{len(batch.armors)} of {len(armors)} armors identified "
                    f"({len(degenerate)} degenerate, {len(batch.rejected)} rejected by classifier)"
                )

        return FrameResult(
            armors=batch.armors,
            rejected=degenerate + batch.rejected,
            xor_diagnostic=batch.xor_diagnostic,
            latency_ms=frame_timer.duration_ms,
            frame_id=fid,
        )

    def stage_summary(self) -> Dict[str, StageSummary]:
        """Rolling latency statistics per stage."""
        return self.stats.summary()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "NumberIdentificationPipeline":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
