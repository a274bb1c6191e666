"""GraphQL queries."""

# Commits are requested a page at a time; ``cursor`` is null for the first page.
find_pull_request_commits = """
query FindPullRequestCommits(
  $repositoryOwner: String!
  $repositoryName: String!
  $pullRequestNumber: Int!
  $pageSize: Int!
  $cursor: String
) {
  repository(owner: $repositoryOwner, name: $repositoryName) {
    pullRequest(number: $pullRequestNumber) {
      commits(first: $pageSize, after: $cursor) {
        pageInfo {
          endCursor
          hasNextPage
        }
        nodes {
          commit {
            author {
              user {
                login
              }
            }
            signature {
              isValid
            }
          }
        }
      }
    }
  }
}
"""

find_pull_request_info_by_number = """
query FindPullRequestInfoByNumber(
  $repositoryOwner: String!
  $repositoryName: String!
  $pullRequestNumber: Int!
) {
  repository(owner: $repositoryOwner, name: $repositoryName) {
    pullRequest(number: $pullRequestNumber) {
      author {
        login
      }
      commits(last: 1) {
        edges {
          node {
            commit {
              messageHeadline
            }
          }
        }
      }
      id
      mergeable
      mergeStateStatus
      merged
      number
      reviews(last: 1, states: APPROVED) {
        edges {
          node {
            state
          }
        }
      }
      state
      title
    }
  }
}
"""
