"""
Unit tests for the mutation pipeline building blocks.
"""

from types import SimpleNamespace

import pytest

from rail_cms.pipeline import (
    ConditionalStep,
    MutationContext,
    MutationPipeline,
    MutationStep,
    OperationFilteredStep,
    PipelineBuilder,
)
from rail_cms.pipeline.steps import apply_nested_operations

pytestmark = pytest.mark.unit


class RecordingStep(MutationStep):
    def __init__(self, name, order):
        self.name = name
        self.order = order

    async def execute(self, ctx):
        ctx.extra.setdefault("ran", []).append(self.name)
        return ctx


class CreateOnlyStep(OperationFilteredStep):
    name = "create_only"
    order = 5
    allowed_operations = ("create",)

    async def execute(self, ctx):
        ctx.extra.setdefault("ran", []).append(self.name)
        return ctx


def make_ctx(operation="create"):
    return MutationContext(list=None, operation=operation, context=None, mutation_state=None)


class TestMutationPipeline:
    @pytest.mark.asyncio
    async def test_steps_run_in_order(self):
        pipeline = MutationPipeline(
            [RecordingStep("late", 30), RecordingStep("early", 10), RecordingStep("middle", 20)]
        )

        ctx = await pipeline.execute(make_ctx())

        assert ctx.extra["ran"] == ["early", "middle", "late"]
        assert pipeline.get_step_names() == ["early", "middle", "late"]

    @pytest.mark.asyncio
    async def test_operation_filtered_step_is_skipped(self):
        pipeline = MutationPipeline([CreateOnlyStep(), RecordingStep("always", 10)])

        ctx = await pipeline.execute(make_ctx("delete"))

        assert ctx.extra["ran"] == ["always"]

    @pytest.mark.asyncio
    async def test_conditional_step(self):
        step = ConditionalStep(RecordingStep("audit", 10), condition=lambda ctx: ctx.operation == "update")
        pipeline = MutationPipeline([step])

        skipped = await pipeline.execute(make_ctx("create"))
        ran = await pipeline.execute(make_ctx("update"))

        assert step.name == "conditional:audit"
        assert "ran" not in skipped.extra
        assert ran.extra["ran"] == ["audit"]

    @pytest.mark.asyncio
    async def test_failing_step_stops_the_pipeline(self):
        class FailingStep(MutationStep):
            name = "failing"
            order = 15

            async def execute(self, ctx):
                raise RuntimeError("boom")

        tail = RecordingStep("tail", 20)
        ctx = make_ctx()

        with pytest.raises(RuntimeError):
            await MutationPipeline([RecordingStep("head", 10), FailingStep(), tail]).execute(ctx)

        assert ctx.extra["ran"] == ["head"]


class TestPipelineBuilder:
    def test_default_pipelines(self):
        pipelines = PipelineBuilder().build_pipelines()

        assert pipelines["create"].get_step_names() == [
            "resolve_defaults",
            "resolve_relationships",
            "resolve_input",
            "validate_input",
            "before_change",
            "create_execution",
        ]
        assert pipelines["update"].get_step_names() == [
            "resolve_relationships",
            "resolve_input",
            "validate_input",
            "before_change",
            "update_execution",
        ]
        assert pipelines["delete"].get_step_names() == [
            "register_backlinks",
            "validate_delete",
            "before_delete",
            "delete_execution",
        ]

    def test_skip_and_add_steps(self):
        builder = PipelineBuilder().skip_step("validate_input").add_step(RecordingStep("stamp", 55))

        names = builder.build_create_pipeline().get_step_names()

        assert "validate_input" not in names
        assert names[-2:] == ["stamp", "create_execution"]


class TestApplyNestedOperations:
    def test_to_many_keeps_current_minus_disconnected_plus_new(self):
        field = SimpleNamespace(many=True)
        operations = {
            "current_value": ["a", "b", "e"],
            "disconnect": ["b"],
            "connect": ["d"],
            "create": ["c"],
        }

        assert apply_nested_operations(field, operations) == ["a", "e", "d", "c"]

    def test_to_many_disconnect_all(self):
        field = SimpleNamespace(many=True)
        operations = {
            "current_value": ["a", "b"],
            "disconnect": ["a", "b"],
            "connect": ["d"],
            "create": ["c"],
        }

        assert apply_nested_operations(field, operations) == ["d", "c"]

    @pytest.mark.parametrize(
        "operations,expected",
        [
            ({"current_value": "a", "disconnect": ["a"], "connect": ["d"], "create": ["c"]}, "c"),
            ({"current_value": "a", "disconnect": [], "connect": ["d"], "create": []}, "d"),
            ({"current_value": "a", "disconnect": ["a"], "connect": [], "create": []}, None),
            ({"current_value": "a", "disconnect": [], "connect": [], "create": []}, "a"),
        ],
    )
    def test_to_one_precedence(self, operations, expected):
        assert apply_nested_operations(SimpleNamespace(many=False), operations) == expected
