"""Token suite recognising vim-plug ``Plug`` directives."""

import re

from .base import PREV, CONTENT, AFTER, token, word


VIM_PLUG_TOKENS = (
    token("vim-plug - explicit mention", 4, r"(?<!\w)vim-plug(?!\w)", PREV, CONTENT, AFTER, flags=re.IGNORECASE),
    token("vimplug - explicit mention", 4, r"(?<!\w)vimplug(?!\w)", PREV, CONTENT, AFTER, flags=re.IGNORECASE),
    token("vim plug - explicit mention", 4, r"(?<!\w)vim\s+plug(?!\w)", PREV, CONTENT, AFTER, flags=re.IGNORECASE),
    word("Plug", 4, "Plug - keyword in context", PREV),
    token("Plug ' - plugin directive", 4, r"\bPlug\s+['\"]"),
    token("plug#begin - initialization function", 4, r"plug#begin", PREV, CONTENT, AFTER),
    token("plug#end - finalization function", 4, r"plug#end", PREV, CONTENT, AFTER),
    token(":PlugInstall - vim-plug command", 4, r":PlugInstall", PREV, CONTENT, AFTER),
    token("PlugInstall - command reference", 4, r"PlugInstall"),
    token("UpdateRemotePlugins - remote plugin command", 4, r"UpdateRemotePlugins"),
)
