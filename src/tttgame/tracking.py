"""
Experiment tracking for simulation runs (optional MLflow backend).

MLflow is imported only when tracking is requested; without it, runs carry on
untracked and a warning says so.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[bool]:
    """Yield True when an MLflow run is active for the block."""
    if not enabled:
        yield False
        return
    try:
        import mlflow  # type: ignore
    except ImportError:
        logging.warning("mlflow is not installed; running %s without tracking", run_name)
        yield False
        return
    if log_dir is not None:
        mlflow.set_tracking_uri((log_dir / "mlruns").resolve().as_uri())
    with mlflow.start_run(run_name=run_name):
        yield True


def log_params(params: Dict[str, object], active: bool = True) -> None:
    if not active:
        return
    import mlflow  # type: ignore

    mlflow.log_params(params)


def log_metrics(metrics: Dict[str, float], active: bool = True) -> None:
    if not active:
        return
    import mlflow  # type: ignore

    mlflow.log_metrics(metrics)
