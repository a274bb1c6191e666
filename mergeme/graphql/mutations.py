"""GraphQL mutations.

The merge method is an enum literal in the document rather than a variable,
so each method produces its own mutation text.
"""

from mergeme.types.pulls import MergeMethod


def _merge_pull_request_field(merge_method: MergeMethod) -> str:
    return f"""
  mergePullRequest(
    input: {{
      commitBody: " "
      commitHeadline: $commitHeadline
      mergeMethod: {merge_method.value}
      pullRequestId: $pullRequestId
    }}
  ) {{
    clientMutationId
  }}"""


def approve_and_merge_pull_request_mutation(merge_method: MergeMethod) -> str:
    """Approve the pull request, then merge it, in a single request."""
    return f"""
mutation ApproveAndMergePullRequest($commitHeadline: String!, $pullRequestId: ID!) {{
  addPullRequestReview(input: {{event: APPROVE, pullRequestId: $pullRequestId}}) {{
    clientMutationId
  }}{_merge_pull_request_field(merge_method)}
}}
"""


def merge_pull_request_mutation(merge_method: MergeMethod) -> str:
    """Merge an already reviewed pull request."""
    return f"""
mutation MergePullRequest($commitHeadline: String!, $pullRequestId: ID!) {{{_merge_pull_request_field(merge_method)}
}}
"""
