"""Feature-level fixtures for i18n system tests.

Provides a small source tree to scan and pre-populated translation stores.
"""

import pytest

from infrastructure.i18n import TranslationStatus


@pytest.fixture
def source_tree(tmp_path):
    """Create a project tree with translation calls in several file kinds.

    Returns a directory structure like:
    - app/Http/LoginController.php
    - resources/views/welcome.blade.php
    - resources/js/app.js
    - resources/js/Profile.vue
    - vendor/package/Helper.php       (excluded)
    - node_modules/lib/index.js       (excluded)
    - README.md                       (unknown extension)
    """
    files = {
        "app/Http/LoginController.php": (
            "<?php\n"
            "class LoginController {\n"
            "    public function failed() {\n"
            "        return __('auth.failed');\n"
            "    }\n"
            "    public function throttle() {\n"
            "        return trans(\"auth.throttle\", ['seconds' => 5]);\n"
            "    }\n"
            "}\n"
        ),
        "resources/views/welcome.blade.php": (
            "<h1>{{ __('messages.welcome') }}</h1>\n"
            "<p>@lang('messages.intro')</p>\n"
        ),
        "resources/js/app.js": "const title = $t('messages.title');\n",
        "resources/js/Profile.vue": (
            "<template>\n  <span>{{ $t('profile.name') }}</span>\n</template>\n"
        ),
        "vendor/package/Helper.php": "<?php echo __('vendor.hidden');\n",
        "node_modules/lib/index.js": "trans('vendor.js');\n",
        "README.md": "__('docs.ignored')\n",
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def populated_store(store, english, french):
    """Store with English reference strings and a partial French set.

    English (default): auth.failed, auth.throttle, messages.welcome (approved)
    French: auth.failed (translated), auth.throttle (pending, no value)
    """
    for group, key, value in (
        ("auth", "failed", "These credentials do not match our records."),
        ("auth", "throttle", "Too many login attempts."),
        ("messages", "welcome", "Welcome"),
    ):
        store.create(english, group, key, value, status=TranslationStatus.APPROVED)
    store.create(french, "auth", "failed", "Identifiants invalides.", status=TranslationStatus.TRANSLATED)
    store.create(french, "auth", "throttle")
    return store
