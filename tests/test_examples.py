import os
import unittest
import importlib.util

EXAMPLES_DIR = os.path.join(os.path.dirname(__file__), "..", "examples")


def load_example(name):
    path = os.path.join(EXAMPLES_DIR, name + ".py")
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestExamples(unittest.TestCase):
    def test_01(self):
        load_example("moe_example01_gp_save_load").main()

    def test_02(self):
        load_example("moe_example02_gaussian_mixture").main()


if __name__ == "__main__":
    unittest.main()
