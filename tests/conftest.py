import os

# Keep CI identity variables from the developer's shell out of the tests
for _var in ("GITHUB_OUTPUT", "GITHUB_REPOSITORY", "GITHUB_REPOSITORY_OWNER", "GITHUB_SHA"):
    os.environ.pop(_var, None)

from tests.fixtures import *  # noqa: F401,F403,E402
