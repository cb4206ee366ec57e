"""
Hook handlers invoked by the installed shims.

Each handler takes a GitClient, the loaded Settings and a Console and
returns the process exit code git should see: 0 lets the operation
proceed, anything else aborts it.
"""

HOOK_NAMES = (
    "pre-commit",
    "pre-merge-commit",
    "pre-push",
    "post-checkout",
    "post-merge",
)

# Hooks re-asserting core.hooksPath; also written to the git hooks directory
RESTORE_HOOKS = ("post-checkout", "post-merge")

# Hooks enforcing the policy; written to the custom hooks directory only
POLICY_HOOKS = ("pre-commit", "pre-merge-commit", "pre-push")
