"""Token suite recognising lazy.nvim plugin specs."""

import re

from .base import PREV, CONTENT, AFTER, token, table_key, word


LAZY_TOKENS = (
    # Weight 4: near-certain identifiers
    token("lazy.nvim - explicit mention", 4, r"lazy[.-]nvim", PREV, CONTENT, flags=re.IGNORECASE),
    token("lazy.vim - explicit mention", 4, r"lazy\.vim\b", PREV, CONTENT, flags=re.IGNORECASE),
    token("VeryLazy - lazy.nvim specific event", 4, r"[\"']VeryLazy[\"']"),
    token("require('lazy') - lazy.nvim entry point", 4, r"require\s*\(?\s*['\"]lazy['\"]\s*\)?", PREV, CONTENT),
    token(":Lazy - lazy.nvim command", 4, r":Lazy\b", PREV, AFTER),
    table_key("dependencies", 4, "dependencies = - dependency list in lua table"),
    table_key("lazy", 4, "lazy = - lazy loading control in lua table"),
    table_key("pin", 4, "pin = - pin plugin to current commit"),
    token("{ 'author/plugin' } - bare plugin spec", 4, r"\{\s*['\"](\w+)/[\w.-]+['\"]\s*\}", single_line=True),
    token("lazy - keyword in heading", 4, r"#+.*(?<![\w-])lazy(?![\w-])", PREV, flags=re.IGNORECASE),
    word("LazyNvim", 4, "LazyNvim - capitalized keyword mention", PREV, CONTENT),
    word("LazyVim", 4, "LazyVim - capitalized keyword mention", PREV, CONTENT),

    # Weight 3: strong circumstantial signal
    word("Lazy", 3, "Lazy - capitalized keyword mention", PREV, CONTENT),

    # Weight 2: weak circumstantial signals
    table_key("enabled", 2, "enabled = true|false - plugin toggle", value=r"(true|false)\b"),
    table_key("priority", 2, "priority = - loading priority"),
    table_key("build", 2, "build = - post-install build step"),
    table_key("version", 2, "version = - semver constraint"),
    table_key("init", 2, "init = - startup hook"),
    word("lazy", 2, "lazy - keyword mention", PREV, CONTENT, ignore_case=True),
    table_key("opts", 2, "opts = - options passed to setup"),
    token("{ ' - Lua table with quote start", 2, r"\{\s*['\"]"),
    token("cmd = - command trigger", 2, r"\bcmd\s*="),
    token("ft = - filetype trigger", 2, r"\bft\s*="),
    token("config = - configuration hook", 2, r"\bconfig\s*="),
    token("event = - event trigger", 2, r"\bevent\s*="),
    token("keys = - keymap trigger", 2, r"\bkeys\s*="),
    token("Lua table with quoted plugin name", 2, r"\{\s*[\"'][^\"']+/[^\"']+[\"']", single_line=True),
)
