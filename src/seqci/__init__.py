
from .dsl import call, spawn, platform_command
from .runner import Orchestrator, run_queue
from .model import FunctionStep, ProcessStep, Ok, Err
from .step_queue import StepQueue
from .config import PipelineConfig, Conversion
from .gate import Feature, RuntimeVersion
from .pipeline import assemble, plan_pipeline

__all__ = [
    "call", "spawn", "platform_command", "Orchestrator", "run_queue",
    "FunctionStep", "ProcessStep", "Ok", "Err", "StepQueue",
    "PipelineConfig", "Conversion", "Feature", "RuntimeVersion",
    "assemble", "plan_pipeline",
]
