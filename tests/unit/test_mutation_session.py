import json

import pytest

from inputforge.contracts.enums import FormatId, MutationStrategyTag
from inputforge.contracts.errors import ContractViolation, PathNotFound
from inputforge.contracts.models import MutationOptions
from inputforge.mutate.filters import ImmutableInputNames
from inputforge.mutate.inputs import InputSet
from inputforge.mutate.session import MutationSession, generate

STRAIGHT_ONLY = MutationOptions(formats=[FormatId.STRAIGHT])

ALL_STRATEGIES = MutationOptions(
    enable_value_mutation=True,
    enable_extra_parameter=True,
    enable_name_fuzzing=True,
)


class RejectAll:
    def is_valid_input_name(self, name):
        return False

    def is_valid_as_input_name_payload(self, payload):
        return False

    def is_valid_input_data(self, payload):
        return False


def _bodies(mutants):
    return [m.to_python() for m in mutants]


@pytest.fixture
def baseline():
    return InputSet({"a": 1, "b": "x"})


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def test_value_mutation_replaces_each_leaf(baseline):
    mutants = list(generate(baseline, "PWNED", STRAIGHT_ONLY))

    assert _bodies(mutants) == [
        {"a": "PWNED", "b": "x"},
        {"a": 1, "b": "PWNED"},
    ]
    first = mutants[0]
    assert first.strategy is MutationStrategyTag.VALUE
    assert first.affected_path == ("a",)
    assert first.affected_input_name == "a"
    assert first.format is FormatId.STRAIGHT
    assert first.seed == "PWNED"
    assert first.affected_value == "PWNED"


def test_immutable_input_is_never_mutated(baseline):
    session = MutationSession(immutability=ImmutableInputNames.of(["a"]))
    mutants = list(session.generate(baseline, "PWNED", STRAIGHT_ONLY))

    assert _bodies(mutants) == [{"a": 1, "b": "PWNED"}]
    assert mutants[0].affected_path == ("b",)


def test_extra_parameter_injection(baseline):
    options = MutationOptions(
        formats=[FormatId.STRAIGHT],
        enable_value_mutation=False,
        enable_extra_parameter=True,
        extra_param_name="__extra",
    )
    mutants = list(generate(baseline, "Z", options))

    assert _bodies(mutants) == [{"a": 1, "b": "x", "__extra": "Z"}]
    mutant = mutants[0]
    assert mutant.strategy is MutationStrategyTag.EXTRA
    assert mutant.affected_path is None
    assert mutant.affected_input_name == "__extra"


@pytest.mark.parametrize("data", [{}, {"a": {}, "b": []}])
def test_empty_baseline_yields_nothing(data):
    session = MutationSession()
    assert list(session.generate(InputSet(data), "P", ALL_STRATEGIES)) == []
    assert session.last_stats.emitted == 0
    assert session.last_stats.exhausted


def test_nested_leaves_are_mutated_not_containers():
    mutants = list(generate(InputSet({"a": {"b": 1}}), "P", STRAIGHT_ONLY))
    assert [m.affected_path for m in mutants] == [("a", "b")]
    assert _bodies(mutants) == [{"a": {"b": "P"}}]


def test_name_fuzzing_uses_payload_as_key(baseline):
    options = MutationOptions(enable_value_mutation=False, enable_name_fuzzing=True)
    mutants = list(generate(baseline, "evil", options))

    assert _bodies(mutants) == [{"a": 1, "b": "x", "evil": options.fuzz_name_value}]
    assert mutants[0].strategy is MutationStrategyTag.NAME
    assert mutants[0].affected_input_name == options.fuzz_name
    assert mutants[0].format is None


# ---------------------------------------------------------------------------
# Ordering, determinism, dedup
# ---------------------------------------------------------------------------

def test_strategies_run_in_declared_order(baseline):
    options = ALL_STRATEGIES.model_copy(update={"formats": (FormatId.STRAIGHT,)})
    tags = [m.strategy for m in generate(baseline, "P", options)]
    assert tags == [
        MutationStrategyTag.VALUE,
        MutationStrategyTag.VALUE,
        MutationStrategyTag.EXTRA,
        MutationStrategyTag.NAME,
    ]


def test_formats_are_the_outer_loop(baseline):
    options = MutationOptions(formats=[FormatId.STRAIGHT, FormatId.SEMICOLON])
    described = [(m.format, m.affected_path) for m in generate(baseline, "P", options)]
    assert described == [
        (FormatId.STRAIGHT, ("a",)),
        (FormatId.STRAIGHT, ("b",)),
        (FormatId.SEMICOLON, ("a",)),
        (FormatId.SEMICOLON, ("b",)),
    ]


def test_generation_is_deterministic():
    baseline = InputSet({"q": "v", "filters": [{"k": None}, 3], "flag": True})

    def run():
        return [(m.describe(), m.dedup_key) for m in generate(baseline, "'\"<x>", ALL_STRATEGIES)]

    assert run() == run()


def test_no_two_mutants_share_a_shape():
    baseline = InputSet({"q": "", "filters": [{"k": ""}, ""]})
    mutants = list(generate(baseline, "P", ALL_STRATEGIES))
    keys = [m.dedup_key for m in mutants]
    assert len(keys) == len(set(keys))


def test_duplicates_across_formats_are_dropped():
    # "append" onto an empty value produces the same body as "straight".
    session = MutationSession()
    options = MutationOptions(formats=[FormatId.STRAIGHT, FormatId.APPEND])
    mutants = list(session.generate(InputSet({"a": "", "b": ""}), "P", options))

    assert _bodies(mutants) == [{"a": "P", "b": ""}, {"a": "", "b": "P"}]
    assert session.last_stats.duplicates == 2


def test_duplicates_across_strategies_are_dropped():
    baseline = InputSet({"__extra": "x"})
    options = MutationOptions(
        formats=[FormatId.STRAIGHT],
        enable_extra_parameter=True,
        extra_param_name="__extra",
    )
    mutants = list(generate(baseline, "Z", options))

    assert _bodies(mutants) == [{"__extra": "Z"}]
    assert mutants[0].strategy is MutationStrategyTag.VALUE


def test_each_call_has_its_own_ledger(baseline):
    session = MutationSession()
    assert len(list(session.generate(baseline, "P", STRAIGHT_ONLY))) == 2
    assert len(list(session.generate(baseline, "P", STRAIGHT_ONLY))) == 2


def test_immutable_paths_never_appear_in_value_mutants():
    flt = ImmutableInputNames.of(["csrf_token"])
    baseline = InputSet({"csrf_token": "t", "form": {"csrf_token": "t2", "name": "n"}, "list": ["v"]})
    mutants = list(MutationSession(immutability=flt).generate(baseline, "P", ALL_STRATEGIES))

    value_paths = [m.affected_path for m in mutants if m.strategy is MutationStrategyTag.VALUE]
    assert value_paths
    assert not any(flt.is_immutable(p) for p in value_paths)


def test_baseline_is_never_altered():
    data = {"a": [1, {"b": "c"}]}
    baseline = InputSet(data)
    list(generate(baseline, "P", ALL_STRATEGIES))
    assert baseline.to_python() == data
    assert baseline.changed_paths() == []


def test_mutants_share_the_baseline_snapshot(baseline):
    mutant = next(generate(baseline, "P", STRAIGHT_ONLY))
    assert mutant.inputs.baseline is baseline.baseline
    assert mutant.inputs.changed_paths() == [("a",)]


# ---------------------------------------------------------------------------
# Soft skips and fatal errors
# ---------------------------------------------------------------------------

def test_invalid_payload_skips_only_value_mutation(baseline, sink):
    class DataRejecter:
        def is_valid_input_data(self, payload):
            return False

    session = MutationSession(payload_validator=DataRejecter(), debug_sink=sink)
    options = ALL_STRATEGIES.model_copy(update={"formats": (FormatId.STRAIGHT,)})
    mutants = list(session.generate(baseline, "P", options))

    assert [m.strategy for m in mutants] == [MutationStrategyTag.EXTRA, MutationStrategyTag.NAME]
    assert sink.reports == [("Payload not supported as input data", "P")]
    assert session.last_stats.skipped == [MutationStrategyTag.VALUE]


def test_rejected_names_skip_injection_strategies(baseline, sink):
    session = MutationSession(name_validator=RejectAll(), debug_sink=sink)
    mutants = list(session.generate(baseline, "P", ALL_STRATEGIES))

    assert {m.strategy for m in mutants} == {MutationStrategyTag.VALUE}
    assert session.last_stats.skipped == [MutationStrategyTag.EXTRA, MutationStrategyTag.NAME]
    assert len(sink.reports) == 2
    assert all(payload == "P" for _, payload in sink.reports)


def test_name_payload_with_nul_is_skipped(baseline, sink):
    options = MutationOptions(enable_value_mutation=False, enable_name_fuzzing=True)
    session = MutationSession(debug_sink=sink)

    assert list(session.generate(baseline, "a\0b", options)) == []
    assert sink.reports == [("Payload not supported as input name", "a\0b")]


def test_injection_needs_an_object_root(sink):
    session = MutationSession(debug_sink=sink)
    options = ALL_STRATEGIES.model_copy(update={"formats": (FormatId.STRAIGHT,)})
    mutants = list(session.generate(InputSet(["x", "y"]), "P", options))

    assert _bodies(mutants) == [["P", "y"], ["x", "P"]]
    assert session.last_stats.skipped == [MutationStrategyTag.EXTRA, MutationStrategyTag.NAME]


def test_path_not_found_aborts_the_run(baseline, monkeypatch):
    def broken(self, path, value):
        raise PathNotFound(path, 0, "simulated")

    monkeypatch.setattr(InputSet, "with_value", broken)
    with pytest.raises(PathNotFound):
        list(generate(baseline, "P", STRAIGHT_ONLY))


def test_bad_arguments_fail_eagerly(baseline):
    with pytest.raises(ContractViolation):
        generate({"a": 1}, "P")
    with pytest.raises(ContractViolation):
        generate(baseline, b"P")


# ---------------------------------------------------------------------------
# Laziness
# ---------------------------------------------------------------------------

def test_consumer_may_stop_early(baseline):
    session = MutationSession()
    stream = session.generate(baseline, "P", STRAIGHT_ONLY)

    first = next(stream)
    stream.close()

    assert first.to_python() == {"a": "P", "b": "x"}
    assert session.last_stats.emitted == 1
    assert not session.last_stats.exhausted
    # An abandoned run leaves nothing behind for the next one.
    assert len(list(session.generate(baseline, "P", STRAIGHT_ONLY))) == 2


def test_interleaved_runs_over_one_baseline_are_independent(baseline):
    session = MutationSession()
    left = session.generate(baseline, "L", STRAIGHT_ONLY)
    right = session.generate(baseline, "R", STRAIGHT_ONLY)

    pairs = list(zip(left, right))
    assert _bodies(m for m, _ in pairs) == [{"a": "L", "b": "x"}, {"a": 1, "b": "L"}]
    assert _bodies(m for _, m in pairs) == [{"a": "R", "b": "x"}, {"a": 1, "b": "R"}]


# ---------------------------------------------------------------------------
# Unusual but valid bodies
# ---------------------------------------------------------------------------

def test_lone_surrogate_leaf_is_mutated():
    # A JSON body may carry an unpaired surrogate escape.
    baseline = InputSet(json.loads('{"a": "\\ud800", "b": "x"}'))
    mutants = list(generate(baseline, "P", STRAIGHT_ONLY))

    assert _bodies(mutants) == [{"a": "P", "b": "x"}, {"a": "\ud800", "b": "P"}]


def test_lone_surrogate_payload_is_generated_and_deduplicated():
    baseline = InputSet({"a": "x", "b": "x"})
    session = MutationSession()
    options = MutationOptions(formats=[FormatId.STRAIGHT, FormatId.STRAIGHT, FormatId.APPEND])
    mutants = list(session.generate(baseline, "\ud800", options))

    assert _bodies(mutants)[:2] == [{"a": "\ud800", "b": "x"}, {"a": "x", "b": "\ud800"}]
    assert len({m.dedup_key for m in mutants}) == len(mutants)


def test_deeply_nested_body_is_mutated():
    depth = 600
    raw = '{"k": ' * depth + '"v"' + "}" * depth
    baseline = InputSet(json.loads(raw))

    mutants = list(generate(baseline, "P", STRAIGHT_ONLY))

    assert len(mutants) == 1
    assert mutants[0].affected_path == ("k",) * depth
    assert mutants[0].inputs.changed_paths() == [("k",) * depth]
    assert baseline.get(("k",) * depth).value == "v"


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

def test_stats_exist_before_the_first_pull(baseline):
    session = MutationSession()
    stream = session.generate(baseline, "P", STRAIGHT_ONLY)

    stats = session.last_stats
    assert stats.emitted == 0
    assert not stats.exhausted

    list(stream)
    assert stats is session.last_stats
    assert stats.emitted == 2
    assert stats.exhausted


def test_stats_follow_the_latest_generate_call(baseline):
    session = MutationSession()
    left = session.generate(baseline, "L", STRAIGHT_ONLY)
    left_stats = session.last_stats
    right = session.generate(InputSet({"only": 1}), "R", STRAIGHT_ONLY)
    right_stats = session.last_stats

    assert left_stats is not right_stats
    list(left)
    list(right)
    assert session.last_stats is right_stats
    assert (left_stats.emitted, right_stats.emitted) == (2, 1)
