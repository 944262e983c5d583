"""Tests for pass planning."""

from joinerator.options import Fixed, GeneratorOptions, Percentage
from joinerator.planner import plan_passes
from joinerator.repertoire import Category


class TestPlanPasses:
    def test_percentage_target_is_truncated(self):
        plan = plan_passes(10, [GeneratorOptions(Category.ABOVE, Percentage(0.5), 1)])
        assert plan.descriptors[0].target_count == 5

    def test_fixed_target(self):
        plan = plan_passes(10, [GeneratorOptions(Category.BELOW, Fixed(3), 2)])
        descriptor = plan.descriptors[0]
        assert descriptor.category is Category.BELOW
        assert descriptor.target_count == 3
        assert descriptor.remaining_passes == 2

    def test_totals(self):
        plan = plan_passes(
            20,
            [
                GeneratorOptions(Category.ABOVE, Percentage(0.5), 3),
                GeneratorOptions(Category.BELOW, Fixed(4), 1),
                GeneratorOptions(Category.THROUGH, Fixed(2), 0),
            ],
        )
        assert plan.total_target_marks == 10 * 3 + 4 * 1
        assert plan.total_iterations == 3

    def test_descriptors_keep_generator_order(self):
        plan = plan_passes(
            5,
            [
                GeneratorOptions(Category.THROUGH, Fixed(1), 1),
                GeneratorOptions(Category.ABOVE, Fixed(1), 1),
            ],
        )
        assert [d.category for d in plan.descriptors] == [Category.THROUGH, Category.ABOVE]

    def test_zero_stacking_contributes_nothing(self):
        plan = plan_passes(10, [GeneratorOptions(Category.ABOVE, Percentage(1.0), 0)])
        assert plan.total_target_marks == 0
        assert plan.total_iterations == 0

    def test_zero_target_contributes_nothing(self):
        plan = plan_passes(1, [GeneratorOptions(Category.ABOVE, Percentage(0.5), 4)])
        assert plan.descriptors[0].target_count == 0
        assert plan.total_target_marks == 0
        assert plan.total_iterations == 4

    def test_empty_generator(self):
        plan = plan_passes(10, [])
        assert plan.descriptors == []
        assert plan.total_target_marks == 0
        assert plan.total_iterations == 0

    def test_empty_input(self):
        plan = plan_passes(0, [GeneratorOptions(Category.ABOVE, Percentage(0.6), 2)])
        assert plan.total_target_marks == 0

    def test_fresh_descriptors_per_plan(self):
        generator = [GeneratorOptions(Category.ABOVE, Fixed(1), 2)]
        first = plan_passes(3, generator)
        first.descriptors[0].remaining_passes = 0
        second = plan_passes(3, generator)
        assert second.descriptors[0].remaining_passes == 2
