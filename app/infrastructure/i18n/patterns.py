"""Declarative extraction tables.

Each source kind maps to an ordered list of regular expressions; group 1 of
every pattern captures the literal translation key. New kinds are added here
(or at runtime through ``TranslationExtractor.add_pattern``), not in code.
"""

from typing import Dict, List

_KEY = r"""['"]([^'"]+)['"]"""

PATTERNS: Dict[str, List[str]] = {
    "php": [
        # Framework translation helpers
        r"__\s*\(\s*" + _KEY + r"\s*[),]",
        r"trans\s*\(\s*" + _KEY + r"\s*[),]",
        r"trans_choice\s*\(\s*" + _KEY + r"\s*[),]",
        r"@lang\s*\(\s*" + _KEY + r"\s*\)",
        # CMS helpers
        r"cms_trans\s*\(\s*" + _KEY + r"\s*[),]",
        r"cms__\s*\(\s*" + _KEY + r"\s*[),]",
    ],
    "blade": [
        r"@lang\s*\(\s*" + _KEY + r"\s*\)",
        r"\{\{\s*__\s*\(\s*" + _KEY + r"\s*\)\s*\}\}",
        r"\{\{\s*trans\s*\(\s*" + _KEY + r"\s*\)\s*\}\}",
        r"\{!!\s*__\s*\(\s*" + _KEY + r"\s*\)\s*!!\}",
        r"@cms_trans\s*\(\s*" + _KEY + r"\s*\)",
    ],
    "javascript": [
        r"trans\s*\(\s*" + _KEY + r"\s*[),]",
        r"__\s*\(\s*" + _KEY + r"\s*[),]",
        r"\$t\s*\(\s*" + _KEY + r"\s*[),]",
        r"i18n\s*\.\s*t\s*\(\s*" + _KEY + r"\s*[),]",
    ],
    "vue": [
        r"\$t\s*\(\s*" + _KEY + r"\s*[),]",
        r"v-t\s*=\s*" + _KEY,
        r"<i18n[^>]*>\s*([^<]+)\s*</i18n>",
    ],
    "python": [
        r"\b_\s*\(\s*" + _KEY + r"\s*[),]",
        r"\bgettext\s*\(\s*" + _KEY + r"\s*[),]",
        r"\bngettext\s*\(\s*" + _KEY + r"\s*,",
        r"\blazy_gettext\s*\(\s*" + _KEY + r"\s*[),]",
    ],
    "jinja": [
        r"\{\{-?\s*_\s*\(\s*" + _KEY + r"\s*[),]",
        r"\{\{-?\s*gettext\s*\(\s*" + _KEY + r"\s*[),]",
        r"\{%-?\s*trans\b[^%]*%\}\s*([^{}]+?)\s*\{%-?\s*endtrans\s*-?%\}",
    ],
}

# Extensions are matched against the end of the file name, longest first,
# so "blade.php" wins over "php".
FILE_EXTENSIONS: Dict[str, List[str]] = {
    "php": ["php"],
    "blade": ["blade.php"],
    "javascript": ["js", "ts", "jsx", "tsx"],
    "vue": ["vue"],
    "python": ["py"],
    "jinja": ["jinja", "jinja2", "j2"],
}

# Directory names (or slash-separated runs of names) never scanned
EXCLUDE_DIRECTORIES: List[str] = [
    "vendor",
    "node_modules",
    "storage",
    "bootstrap/cache",
    ".git",
    "public/build",
    "dist",
]
