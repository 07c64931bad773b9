"""Version information for localization-pipeline."""

__version__ = "0.3.1"
__author__ = "Sezgin Paksoy"
__description__ = "Loader pipeline that prepares localization files for translation and writes translations back"

# Changelog:
# 0.3.1 - Bug fixes
#       - Literal {, } and # in plural forms quoted in ICU strings
#       - JSON files with a top-level array; plurals inside arrays
#       - Non-UTF-8 resource files reported as FormatError
#       - --log-file option
#
# 0.3.0 - Plural support
#       - Plural dictionaries converted to ICU MessageFormat on pull
#       - printf specifiers kept in _meta and restored on push
#       - CLDR plural categories from Babel
#       - PluralWriteError names the failing key and locale
#
# 0.2.0 - Content protection
#       - Fenced code, inline code and locked regex matches replaced by
#         content-addressed placeholders
#       - Exactly one blank line around code blocks and image lines
#       - Placeholders restored from the pushed locale and the source locale
#       - Markdown bucket pipeline (sections split on blank lines)
#
# 0.1.0 - Initial release
#       - Loader contract with pull/push capture and compose_loaders()
#       - JSON bucket pipeline (file, JSON, flat keys)
#       - Locked and ignored key patterns (prefix or glob)
#       - i18n.yml configuration with validation
#       - CLI: init, show, pull
