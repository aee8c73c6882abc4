"""Architecture tests using pytest-archon.

These tests enforce DDD layer boundaries inside the IAM and Tickets
bounded contexts, and keep the two contexts decoupled: Tickets reaches IAM
only through its dependency-injection wiring and the shared kernel.
"""

import pytest
from pytest_archon import archrule

CONTEXTS = ["iam", "tickets"]


@pytest.mark.parametrize("context", CONTEXTS)
class TestDomainLayerBoundaries:
    """The domain layer holds pure business logic."""

    def test_domain_does_not_import_infrastructure(self, context):
        (
            archrule(f"{context}_domain_no_infrastructure")
            .match(f"{context}.domain*")
            .should_not_import(
                f"{context}.infrastructure*", "infrastructure*", "sqlalchemy*"
            )
            .check(context)
        )

    def test_domain_does_not_import_application(self, context):
        (
            archrule(f"{context}_domain_no_application")
            .match(f"{context}.domain*")
            .should_not_import(f"{context}.application*")
            .check(context)
        )

    def test_domain_does_not_import_fastapi(self, context):
        (
            archrule(f"{context}_domain_no_fastapi")
            .match(f"{context}.domain*")
            .should_not_import("fastapi*", "starlette*")
            .check(context)
        )


@pytest.mark.parametrize("context", CONTEXTS)
class TestPortsAndApplicationBoundaries:
    def test_ports_do_not_import_infrastructure(self, context):
        """Ports define interfaces and know nothing of their implementations."""
        (
            archrule(f"{context}_ports_no_infrastructure")
            .match(f"{context}.ports*")
            .should_not_import(f"{context}.infrastructure*")
            .check(context)
        )

    def test_application_does_not_import_own_infrastructure(self, context):
        """Services depend on repository protocols, not SQLAlchemy repositories.

        Cross-cutting transaction helpers in the top-level infrastructure
        package are allowed.
        """
        (
            archrule(f"{context}_application_no_infrastructure")
            .match(f"{context}.application*")
            .should_not_import(f"{context}.infrastructure*", f"{context}.presentation*")
            .check(context)
        )

    def test_infrastructure_does_not_import_application(self, context):
        (
            archrule(f"{context}_infrastructure_no_application")
            .match(f"{context}.infrastructure*")
            .should_not_import(f"{context}.application*", f"{context}.presentation*")
            .check(context)
        )


class TestBoundedContextIsolation:
    def test_iam_does_not_import_tickets(self):
        """IAM owns identity and authorization and knows nothing of tickets."""
        (
            archrule("iam_no_tickets")
            .match("iam*")
            .should_not_import("tickets*")
            .check("iam")
        )

    def test_tickets_reaches_iam_only_through_dependencies(self):
        """Tickets asks authorization questions via the shared-kernel protocol.

        Only the FastAPI wiring in ``tickets.dependencies`` may construct the
        IAM resolver. Routes reach IAM through that wiring, so only direct
        imports are checked.
        """
        (
            archrule("tickets_no_iam")
            .match("tickets*")
            .exclude("tickets.dependencies*")
            .should_not_import("iam*")
            .check("tickets", only_direct_imports=True)
        )

    def test_shared_kernel_does_not_import_contexts(self):
        (
            archrule("shared_kernel_no_contexts")
            .match("shared_kernel*")
            .should_not_import("iam*", "tickets*")
            .check("shared_kernel")
        )
