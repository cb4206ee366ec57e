"""
Exit codes for branchguard.

Standardized exit codes following Unix conventions with semantic meaning.

Exit Code Semantics:
  0: Success - command completed, or the hook allows the git operation
  1: Blocked - a hook refused the git operation (git aborts on any non-zero)
  2: Usage Error - bad flags, invalid inputs, missing required args
  3: Config Error - unreadable or invalid configuration
  4: Tool Error - git failed or the path is not a git repository
  5: Prerequisite Error - git is not installed
  130: Cancelled - user cancelled operation (SIGINT)

Note: Click/Typer argument parsing errors (EXIT_USAGE) occur before
commands run.
"""

# Success
EXIT_SUCCESS = 0  # Command completed / hook allows the operation

EXIT_BLOCKED = 1  # Hook refused the operation
EXIT_USAGE = 2  # Invalid usage/arguments (Click default)
EXIT_CONFIG = 3  # Config error
EXIT_TOOL = 4  # External tool failed (git error, not a git repo)
EXIT_PREREQ = 5  # Prerequisites not met (git not installed)

# Cancellation (SIGINT convention)
EXIT_CANCELLED = 130

# Map exception types to exit codes
EXIT_CODE_MAP = {
    "BranchGuardError": EXIT_TOOL,
    "NotAGitRepoError": EXIT_TOOL,
    "HooksInstallError": EXIT_TOOL,
    "ConfigError": EXIT_CONFIG,
    "GitNotFoundError": EXIT_PREREQ,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """Return the appropriate exit code for an exception type.

    Walk up the exception's MRO to find a matching type in EXIT_CODE_MAP.
    Fall back to EXIT_BLOCKED if no specific mapping exists.
    """
    for cls in type(exc).__mro__:
        if cls.__name__ in EXIT_CODE_MAP:
            return EXIT_CODE_MAP[cls.__name__]

    return EXIT_BLOCKED
