"""Token suite recognising packer.nvim ``use`` declarations."""

import re

from .base import PREV, CONTENT, AFTER, token, table_key, word


PACKER_TOKENS = (
    # Weight 4
    token("packer.nvim - explicit mention", 4, r"packer\.nvim", PREV, CONTENT, flags=re.IGNORECASE),
    token("packer.startup - initialization function", 4, r"packer\.startup", PREV, CONTENT),
    token("require('packer') - packer entry point", 4, r"require\s*\(?\s*['\"]packer['\"]\s*\)?", PREV, CONTENT),
    token(":Packer - packer command", 4, r":Packer\w*", PREV, AFTER),
    token("use { - packer table declaration", 4, r"\buse\s*\{"),
    token("use ( - packer call declaration", 4, r"\buse\s*\(\s*['{\"]"),
    token("use ' - packer string declaration", 4, r"^\s*use\s*['\"]", flags=re.MULTILINE),
    table_key("requires", 4, "requires = - dependency specification"),
    table_key("opt", 4, "opt = - optional plugin loading"),
    table_key("as", 4, "as = - plugin alias"),
    token("{ 'author/plugin' } - bare plugin spec", 4, r"\{\s*['\"](\w+)/[\w.-]+['\"]\s*\}", single_line=True),
    word("packer", 4, "packer - keyword mention", PREV, CONTENT, ignore_case=True),
    word("Packer", 4, "Packer - capitalized keyword mention", PREV, CONTENT),

    # Weight 2
    table_key("disable", 2, "disable = true|false - plugin toggle", value=r"(true|false)\b"),
    table_key("setup", 2, "setup = - pre-load hook"),
    table_key("run", 2, "run = - post-install command"),
    table_key("fn", 2, "fn = - function trigger"),
    table_key("module", 2, "module = - module trigger"),
    token("{ ' - Lua table with quote start", 2, r"\{\s*['\"]"),
    token("cmd = - command trigger", 2, r"\bcmd\s*="),
    token("ft = - filetype trigger", 2, r"\bft\s*="),
    token("config = - configuration hook", 2, r"\bconfig\s*="),
    token("event = - event trigger", 2, r"\bevent\s*="),
    token("keys = - keymap trigger", 2, r"\bkeys\s*="),
    token("Lua table with quoted plugin name", 2, r"\{\s*[\"'][^\"']+/[^\"']+[\"']", single_line=True),
)
