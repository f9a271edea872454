"""GitHub Actions workflow that notifies the portfolio on push."""

WORKFLOW_PATH = ".github/workflows/sync-portfolio.yml"

_WORKFLOW = """\
name: Sync to Portfolio

on:
  push:
    branches: [main, master]
    paths:
      - '.project-metadata.mdx'
      - 'proj-images/**'
  workflow_dispatch:

jobs:
  sync:
    runs-on: ubuntu-latest

    steps:
      - name: Checkout code
        uses: actions/checkout@v4

      - name: Setup Python
        uses: actions/setup-python@v5
        with:
          python-version: '3.x'

      - name: Extract metadata
        id: metadata
        run: |
          pip install --quiet python-frontmatter
          python - <<'PY' > metadata.json
          import json, os
          from datetime import datetime, timezone

          import frontmatter

          post = frontmatter.load('.project-metadata.mdx')
          data = dict(post.metadata)
          owner, name = os.environ['GITHUB_REPOSITORY'].split('/')
          data['repository'] = {
              'owner': owner,
              'name': name,
              'url': f"https://github.com/{owner}/{name}",
          }
          data['lastCommit'] = os.environ['GITHUB_SHA']
          data['lastUpdated'] = datetime.now(timezone.utc).isoformat()
          print(json.dumps({'metadata': data, 'markdown': post.content}, default=str))
          PY

      - name: Notify Portfolio
        env:
          PORTFOLIO_API_URL: ${{ secrets.PORTFOLIO_API_URL }}
          PORTFOLIO_API_KEY: ${{ secrets.PORTFOLIO_API_KEY }}
        run: |
          curl --fail -X POST "$PORTFOLIO_API_URL/api/update-project" \\
            -H "Content-Type: application/json" \\
            -H "Authorization: Bearer $PORTFOLIO_API_KEY" \\
            --data @metadata.json

      - name: Create deployment badge
        if: success()
        run: |
          echo "![Synced to Portfolio](https://img.shields.io/badge/portfolio-synced-success)" >> $GITHUB_STEP_SUMMARY
          echo "Last sync: $(date)" >> $GITHUB_STEP_SUMMARY
"""


def generate_workflow() -> str:
    return _WORKFLOW
