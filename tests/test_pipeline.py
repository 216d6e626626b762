from dataclasses import replace

import pytest

from seqci.errors import ConfigError, MissingOptionalDependency
from seqci.gate import RuntimeVersion, evaluate_gates
from seqci.model import FunctionStep, ProcessStep
from seqci.pipeline import assemble, plan_pipeline
from seqci.step_workflows.bundle import BundlerHandle
from seqci.step_workflows.convert import convert, convert_with_passes
from seqci.step_workflows.link import link

BUNDLER = BundlerHandle(name="browserify", executable="/usr/bin/browserify")


def _plan(cfg, version, bundler=BUNDLER):
    gates = evaluate_gates(RuntimeVersion.parse(version), cfg.features, cfg.bundle_excluded_versions)
    return plan_pipeline(cfg, gates, bundler)


def _kinds(plan):
    out = []
    for s in plan.steps:
        if isinstance(s, ProcessStep):
            out.append("cli" if s.quiet else "test")
        elif s.operation in (convert, convert_with_passes):
            out.append("convert")
        elif s.operation is link:
            out.append("link")
        else:
            out.append("bundle")
    return out


def test_modern_runtime_queue_order(project_config):
    plan = _plan(project_config, "20.0.0")

    assert _kinds(plan) == (
        ["test", "test"]
        + ["convert"] * 5
        + ["link", "link"]
        + ["bundle"]
        + ["test"]
        + ["cli"] * 8
    )
    assert plan.placeholders == []
    assert plan.warnings == []

    modern = plan.steps[0]
    assert modern.args[0] == "--harmony"
    assert modern.args[-1] == "./test/tests.es6.js"

    final = plan.steps[10]
    assert final.args[:4] == ("--reporter", "spec", "--require", "./test/runtime.js")
    assert final.args[4:] == (
        "./test/tests.es5.js",
        "./test/tests-node4.es5.js",
        "./test/non-native.es5.js",
        "./test/async.es5.js",
        "./test/regression.es5.js",
        "./test/tests.transform.js",
    )


def test_below_both_thresholds_omits_modern_suites_and_gated_conversions(project_config, project):
    plan = _plan(project_config, "0.10.48")

    assert _kinds(plan) == ["convert"] * 3 + ["link", "link", "bundle", "test"] + ["cli"] * 8
    converted = [s.args[1].name for s in plan.steps if isinstance(s, FunctionStep) and s.operation in (convert, convert_with_passes)]
    assert converted == ["non-native.es5.js", "async.es5.js", "regression.es5.js"]
    assert plan.placeholders == [
        project / "test" / "tests.es5.js",
        project / "test" / "tests-node4.es5.js",
    ]
    skipped = [name for name, _ in plan.skipped]
    assert "test ./test/tests.es6.js" in skipped
    assert "test ./test/tests-node4.es6.js" in skipped


def test_between_thresholds_keeps_first_feature_only(project_config, project):
    plan = _plan(project_config, "0.12.7")

    tests = [s for s in plan.steps if isinstance(s, ProcessStep) and not s.quiet]
    assert [t.args[-1] for t in tests[:1]] == ["./test/tests.es6.js"]
    assert len(tests) == 2
    assert plan.placeholders == [project / "test" / "tests-node4.es5.js"]


def test_plan_has_no_side_effects(project_config, project):
    _plan(project_config, "0.10.0")
    assert not (project / "test" / "tests-node4.es5.js").exists()


def test_assemble_writes_placeholders_before_anything_runs(project_config, project):
    pipeline = assemble(project_config, RuntimeVersion.parse("0.10.0"), bundler=BUNDLER)

    placeholder = project / "test" / "tests-node4.es5.js"
    assert placeholder.exists()
    assert placeholder.read_text() == ""
    assert len(pipeline.queue) == len(pipeline.plan.steps)
    assert str(pipeline.gates.version) == "0.10.0"
    assert not pipeline.gates.is_enabled("generators")


def test_missing_bundler_is_a_warning_not_an_error(project_config, capsys):
    pipeline = assemble(project_config, RuntimeVersion.parse("20.0.0"), resolve=False)

    assert "bundle" not in _kinds(pipeline.plan)
    [missing] = pipeline.plan.warnings
    assert isinstance(missing, MissingOptionalDependency)
    assert missing.tool == project_config.bundler
    assert "skipping bundle step" in capsys.readouterr().err


def test_bundling_disabled_on_excluded_version(project_config):
    plan = _plan(project_config, "0.11.7")
    assert "bundle" not in _kinds(plan)
    assert plan.warnings == []


def test_bundler_disabled_in_config_skips_silently(project_config):
    plan = _plan(replace(project_config, bundler=None), "20.0.0", bundler=None)
    assert "bundle" not in _kinds(plan)
    assert plan.warnings == []


def test_bundle_inputs_include_setup_and_all_targets(project_config, project):
    plan = _plan(project_config, "20.0.0")
    step = next(s for s in plan.steps if isinstance(s, FunctionStep) and s.args and s.args[0] is BUNDLER)
    _handle, inputs, output = step.args
    assert [p.name for p in inputs] == [
        "runtime.js",
        "tests.es5.js",
        "tests-node4.es5.js",
        "non-native.es5.js",
        "async.es5.js",
        "regression.es5.js",
    ]
    assert output == project / "test" / "tests.browser.js"


def test_runner_assets_are_linked_from_runner_directory(project_config, project):
    plan = _plan(project_config, "20.0.0")
    links = [s for s in plan.steps if isinstance(s, FunctionStep) and s.operation is link]
    assert [(src, dst) for src, dst in (s.args for s in links)] == [
        (project / "node_modules/mocha/mocha.js", project / "test/mocha.js"),
        (project / "node_modules/mocha/mocha.css", project / "test/mocha.css"),
    ]


def test_process_steps_run_from_project_root(project_config, project):
    plan = _plan(project_config, "20.0.0")
    assert {s.cwd for s in plan.steps if isinstance(s, ProcessStep)} == {str(project)}


def test_conversions_without_transform_are_a_config_error(project_config):
    with pytest.raises(ConfigError):
        _plan(replace(project_config, transform=None), "20.0.0")


def test_conversion_requiring_unknown_feature_is_a_config_error(project_config):
    from seqci.config import Conversion

    cfg = replace(project_config, conversions=(Conversion("a.js", "b.js", requires="es2040"),))
    with pytest.raises(ConfigError):
        _plan(cfg, "20.0.0")
