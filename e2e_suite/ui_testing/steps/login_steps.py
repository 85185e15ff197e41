"""
================================================================================
Login Step Definitions
================================================================================

Gherkin bindings for the login feature. Each step drives the LoginPage of
the running scenario; async page operations are run on the suite's event
loop through the `run_async` fixture.

Included from the root conftest via `pytest_plugins`.

================================================================================
"""

from pytest_bdd import given, parsers, then, when

from e2e_suite.ui_testing.framework.assertions import Assertions
from e2e_suite.ui_testing.framework.execution_context import ExecutionContext
from e2e_suite.ui_testing.framework.settings import UISettings
from e2e_suite.ui_testing.pages.login_page import LoginPage


@given("I navigate to the login page", target_fixture="login_page")
def navigate_to_login_page(
    execution_context: ExecutionContext,
    settings: UISettings,
    run_async,
) -> LoginPage:
    login_page = LoginPage(
        execution_context,
        "" if settings.base_url_is_fallback else settings.base_url,
    )
    run_async(login_page.navigate_to_login_page())
    return login_page


@when(parsers.parse('I enter the userName "{username}"'))
def enter_username(login_page: LoginPage, username: str, run_async):
    run_async(login_page.enter_username(username))


@when(parsers.parse('I enter the password "{password}"'))
def enter_password(login_page: LoginPage, password: str, run_async):
    run_async(login_page.enter_password(password))


@when("I click the login button")
def click_login_button(login_page: LoginPage, run_async):
    run_async(login_page.click_login_button())


@then("I should be redirected to the dashboard")
def redirected_to_dashboard(execution_context: ExecutionContext, run_async):
    run_async(Assertions.url_contains(execution_context.page, "dashboard"))
