"""Help text for hax-ai commands."""

from knack.help_files import helps

helps["ask"] = """
type: command
short-summary: Turn a plain-language request into a Command Plan.
long-summary: |
    Classifies the request, extracts what it needs (site name, page title,
    parent page, topic, domain) and prints the hax and surge commands that
    would carry it out. Nothing is executed.

    When no rule matches and an AI provider is configured, the provider is
    asked for the commands instead.
examples:
    - name: Create a site
      text: hax-ai ask -m "Create a site called my-blog"
    - name: Add a child page with generated content
      text: hax-ai ask -m "Add a page called Cells under the Biology page about plant cells"
    - name: Get the plan as JSON
      text: hax-ai ask -m "Deploy my site" --json
"""

helps["classify"] = """
type: command
short-summary: Show which intent a request maps to.
examples:
    - name: Check how a request is read
      text: hax-ai classify -m "add a multiple-choice quiz to the intro page"
"""

helps["chat"] = """
type: command
short-summary: Interactive session that keeps conversation history.
long-summary: |
    Each line you type produces a Command Plan. Type /clear to forget the
    conversation and /exit to quit.
"""

helps["config"] = """
type: group
short-summary: Manage hax-ai configuration.
long-summary: |
    Configuration lives in hax-ai.yaml under $HAX_AI_HOME (default ~/.hax-ai).
    The API key is kept separately in hax-ai.secrets.yaml.
"""

helps["config init"] = """
type: command
short-summary: Create hax-ai.yaml.
examples:
    - name: Use OpenAI and keep sites in ~/sites
      text: hax-ai config init --provider openai --storage-root ~/sites
"""

helps["config show"] = """
type: command
short-summary: Display current configuration, with secrets masked.
"""

helps["config get"] = """
type: command
short-summary: Get a configuration value.
examples:
    - name: Show the AI provider
      text: hax-ai config get --key ai.provider
"""

helps["config set"] = """
type: command
short-summary: Set a configuration value.
examples:
    - name: Keep more conversation history
      text: hax-ai config set --key engine.history_limit --value 24
    - name: Always deploy to the same domain
      text: hax-ai config set --key deploy.domain --value my-course.surge.sh
"""

helps["resources"] = """
type: group
short-summary: Course materials used to ground generated content.
long-summary: |
    Documents placed in <site>/resources/ (txt, md, html, csv, json, pdf,
    docx, pptx, xlsx) and links listed in <site>/resources.json are read
    when pages, quizzes and slides are generated.
"""

helps["resources show"] = """
type: command
short-summary: Summarize a site's course materials.
"""

helps["resources add"] = """
type: command
short-summary: Add a reference link to a site's course materials.
examples:
    - name: Add a reading
      text: hax-ai resources add --site biology-101 --url https://example.edu/cells --description "Cell structure reading"
"""
