import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass
class CIInfo:
    # gitlab, github, jenkins, circleci, azure, bitbucket or local
    platform: str
    build_number: Optional[str] = None
    build_url: Optional[str] = None
    branch: Optional[str] = None
    commit: Optional[str] = None


def detect_ci(environ: Optional[Mapping[str, str]] = None) -> CIInfo:
    """
    Detects the CI platform the process runs on from its environment variables.

    Args:
        environ: The environment to inspect. Defaults to `os.environ`.

    Returns:
        The platform with its build number, build URL, branch and commit, or
        a `local` CIInfo when no known CI variables are set.
    """
    env = os.environ if environ is None else environ

    if env.get("GITLAB_CI"):
        return CIInfo(
            "gitlab",
            env.get("CI_PIPELINE_ID"),
            env.get("CI_PIPELINE_URL"),
            env.get("CI_COMMIT_REF_NAME"),
            env.get("CI_COMMIT_SHA"),
        )
    if env.get("GITHUB_ACTIONS"):
        return CIInfo(
            "github",
            env.get("GITHUB_RUN_NUMBER"),
            f"{env.get('GITHUB_SERVER_URL')}/{env.get('GITHUB_REPOSITORY')}/actions/runs/{env.get('GITHUB_RUN_ID')}",
            env.get("GITHUB_REF_NAME"),
            env.get("GITHUB_SHA"),
        )
    if env.get("JENKINS_HOME"):
        return CIInfo(
            "jenkins",
            env.get("BUILD_NUMBER"),
            env.get("BUILD_URL"),
            env.get("GIT_BRANCH"),
            env.get("GIT_COMMIT"),
        )
    if env.get("CIRCLECI"):
        return CIInfo(
            "circleci",
            env.get("CIRCLE_BUILD_NUM"),
            env.get("CIRCLE_BUILD_URL"),
            env.get("CIRCLE_BRANCH"),
            env.get("CIRCLE_SHA1"),
        )
    if env.get("TF_BUILD"):
        return CIInfo(
            "azure",
            env.get("BUILD_BUILDNUMBER"),
            f"{env.get('SYSTEM_TEAMFOUNDATIONCOLLECTIONURI')}{env.get('SYSTEM_TEAMPROJECT')}"
            f"/_build/results?buildId={env.get('BUILD_BUILDID')}",
            env.get("BUILD_SOURCEBRANCHNAME"),
            env.get("BUILD_SOURCEVERSION"),
        )
    if env.get("BITBUCKET_BUILD_NUMBER"):
        return CIInfo(
            "bitbucket",
            env.get("BITBUCKET_BUILD_NUMBER"),
            f"https://bitbucket.org/{env.get('BITBUCKET_REPO_FULL_NAME')}"
            f"/addon/pipelines/home#!/results/{env.get('BITBUCKET_BUILD_NUMBER')}",
            env.get("BITBUCKET_BRANCH"),
            env.get("BITBUCKET_COMMIT"),
        )
    return CIInfo("local")


def is_ci(environ: Optional[Mapping[str, str]] = None) -> bool:
    return detect_ci(environ).platform != "local"
