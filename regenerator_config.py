# regenerator_config.py  (seqci run --config regenerator_config.py)
# Pipeline for a regenerator-style checkout: convert the test suites, run
# them under mocha, bundle them for the browser, then exercise the CLI.
from __future__ import annotations

from seqci.config import Conversion, PipelineConfig
from seqci.gate import Feature


def config():
    return PipelineConfig(
        name="regenerator",
        transform="regenerator_py.compiler:compile",
        test_runner="mocha",
        setup_script="./test/runtime.js",
        features=(
            Feature("generators", minimum_version="0.11.2", suite="./test/tests.es6.js"),
            Feature("node4", minimum_version="4.0.0", suite="./test/tests-node4.es6.js"),
        ),
        conversions=(
            Conversion("./test/tests.es6.js", "./test/tests.es5.js", requires="generators"),
            Conversion("./test/tests-node4.es6.js", "./test/tests-node4.es5.js", requires="node4"),
            Conversion("./test/non-native.js", "./test/non-native.es5.js"),
            Conversion("./test/async.js", "./test/async.es5.js"),
            Conversion("./test/regression.js", "./test/regression.es5.js", passes=("spread", "parameters")),
        ),
        # also run the CLI on a file that triggers the falsy replaceWith path
        cli_fixtures=(
            "./test/async.es5.js",
            "./test/nothing-to-transform.js",
            "./test/replaceWith-falsy.js",
        ),
        runtime_command=("node", "--version"),
    )
