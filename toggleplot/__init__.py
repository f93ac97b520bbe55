from toggleplot.config import ViewerConfig, load_config
from toggleplot.controller import ChartController, init
from toggleplot.dataset import build_initial_state, load_dataset
from toggleplot.effects import FrameQueue, FrameScheduler, next_frame
from toggleplot.errors import MalformedDatasetError, ToggleplotError, UnknownMessageError
from toggleplot.host import Container, DomEvent, MemoryContainer
from toggleplot.messages import AnimationStep, Message, ToggleChart
from toggleplot.reducer import update
from toggleplot.selectors import ChartSelectors, LinearScaler, MemoizedSelector, compute_boundary
from toggleplot.state import ChartState, Series, Transition, ViewportDimensions
from toggleplot.view import Subscription, SubscriptionTable, view

__all__ = [
    "AnimationStep",
    "ChartController",
    "ChartSelectors",
    "ChartState",
    "Container",
    "DomEvent",
    "FrameQueue",
    "FrameScheduler",
    "LinearScaler",
    "MalformedDatasetError",
    "MemoizedSelector",
    "MemoryContainer",
    "Message",
    "Series",
    "Subscription",
    "SubscriptionTable",
    "ToggleChart",
    "ToggleplotError",
    "Transition",
    "UnknownMessageError",
    "ViewerConfig",
    "ViewportDimensions",
    "build_initial_state",
    "compute_boundary",
    "init",
    "load_config",
    "load_dataset",
    "next_frame",
    "update",
    "view",
]
