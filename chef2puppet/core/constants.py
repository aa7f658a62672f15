"""Constants used throughout chef2puppet."""

# File names
METADATA_JSON_FILENAME = "metadata.json"
METADATA_FILENAME = "metadata.rb"
RECIPES_DIRNAME = "recipes"
MANIFESTS_DIRNAME = "manifests"

# Puppet module layout created under <output>/<cookbook name>
MODULE_DIRECTORIES = (
    "files",
    "manifests",
    "lib",
    "lib/puppet",
    "lib/puppet/parser",
    "lib/puppet/provider",
    "lib/puppet/type",
    "lib/facter",
    "templates",
)

# Regular expression patterns for recipe line classification
REGEX_BLANK_LINE = r"^\s*$"
REGEX_COMMENT_LINE = r"^#"
REGEX_BLOCK_TERMINATOR = r"^end\b"
REGEX_NUMERIC_VALUE = r"^[0-9]+$"
REGEX_SEPARATORS = r"[-_]"

# Chef resource to Puppet type mappings
RESOURCE_MAPPINGS = {
    "cookbook_file": "file",
    "cron": "cron",
    "deploy": "deploy",
    "directory": "directory",
    "erlang_call": "erlang_call",
    "execute": "exec",
    "file": "file",
    "gem_package": "package",
    "git": "git",
    "group": "group",
    "http_request": "http_request",
    "ifconfig": "ifconfig",
    "link": "file",
    "log": "log",
    "mdadm": "mdadm",
    "mount": "mount",
    "package": "package",
    "remote_directory": "remote_directory",
    "remote_file": "file",
    "route": "route",
    "ruby_block": "ruby_block",
    "scm": "scm",
    "script": "script",
    "service": "service",
    "subversion": "subversion",
    "template": "file",
    "user": "user",
}

# Chef action to Puppet ensure mappings
ACTION_TO_ENSURE = {
    "install": "installed",
    "upgrade": "latest",
    "remove": "absent",
    "purge": "purged",
    "create": "present",
    "delete": "absent",
    "start": "running",
    "stop": "stopped",
}

# Chef resources whose action is implicit, made explicit for Puppet
DEFAULT_ACTIONS = {
    "package": "install",
    "gem_package": "install",
}

# Resource types with special attribute handling
EXECUTE_RESOURCE = "execute"
TEMPLATE_RESOURCE = "template"
FILE_SOURCE_RESOURCES = ("file", "remote_file", "cookbook_file")
INCLUDE_RECIPE = "include_recipe"

# Ruby predicates rewritten to shell tests
FILE_TEST_PREDICATES = {
    "File.exist?": "-f",
    "File.exists?": "-f",
    "File.file?": "-f",
    "File.directory?": "-d",
    "Dir.exist?": "-d",
    "Dir.exists?": "-d",
}
