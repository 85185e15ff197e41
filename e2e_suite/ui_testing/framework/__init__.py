"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based building blocks of the BDD browser suite.

Components:
    - lifecycle: browser and per-scenario context management
    - execution_context: handles shared between lifecycle, pages and steps
    - element_actions / locator_resolver / assertions: logged Playwright wrappers
    - page_base: base page object with the generic `perform` helper

Author: Automation Team
License: MIT
================================================================================
"""

from .assertions import Assertions
from .element_actions import ElementActions
from .errors import (
    ActionFailed,
    ConfigurationError,
    LifecycleTeardownError,
    NotInitializedError,
)
from .execution_context import ExecutionContext
from .lifecycle import LifecycleState, ScenarioLifecycle, ScenarioRecord
from .locator_resolver import LocatorResolver
from .page_base import BasePage, PageBase
from .settings import UISettings, load_settings

__all__ = [
    "ActionFailed",
    "Assertions",
    "BasePage",
    "ConfigurationError",
    "ElementActions",
    "ExecutionContext",
    "LifecycleState",
    "LifecycleTeardownError",
    "LocatorResolver",
    "NotInitializedError",
    "PageBase",
    "ScenarioLifecycle",
    "ScenarioRecord",
    "UISettings",
    "load_settings",
]
