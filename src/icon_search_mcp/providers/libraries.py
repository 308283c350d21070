from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LibraryDefinition:
    name: str
    display_name: str
    version: str
    description: str
    source_url: str
    license: str
    package: str
    icon_paths: tuple[str, ...]
    styles: tuple[str, ...] = ("regular",)
    extra_tags: tuple[str, ...] = ()
    synonyms: dict[str, tuple[str, ...]] = field(default_factory=dict)


_OCTICONS_SYNONYMS: dict[str, tuple[str, ...]] = {
    "accessibility": ("a11y", "accessible", "disability"),
    "alert": ("warning", "caution", "attention"),
    "archive": ("box", "storage", "backup"),
    "beaker": ("science", "experiment", "lab"),
    "bell": ("notification", "alert", "ring"),
    "book": ("read", "library", "documentation"),
    "bookmark": ("save", "favorite", "mark"),
    "bug": ("insect", "error", "debug"),
    "calendar": ("date", "schedule", "time"),
    "check": ("tick", "confirm", "done"),
    "clock": ("time", "schedule", "timer"),
    "cloud": ("storage", "sync", "weather"),
    "code": ("programming", "development", "script"),
    "comment": ("note", "remark", "message"),
    "credit-card": ("payment", "money", "finance"),
    "database": ("storage", "data", "server"),
    "device-mobile": ("phone", "smartphone", "mobile"),
    "diff": ("compare", "changes", "difference"),
    "download": ("save", "import", "get"),
    "eye": ("view", "see", "visibility"),
    "file-directory": ("folder", "collection", "group"),
    "flame": ("fire", "hot", "trending"),
    "gear": ("settings", "configuration", "cog"),
    "git-branch": ("version", "control", "development"),
    "git-pull-request": ("pr", "merge", "review"),
    "globe": ("world", "earth", "international"),
    "heart": ("love", "like", "favorite"),
    "home": ("house", "main", "start"),
    "info": ("information", "help", "about"),
    "issue": ("problem", "bug", "ticket"),
    "key": ("password", "security", "access"),
    "link": ("chain", "connect", "url"),
    "location": ("pin", "place", "map"),
    "lock": ("secure", "private", "protected"),
    "mail": ("email", "message", "letter"),
    "mark-github": ("github", "logo", "brand"),
    "pencil": ("edit", "write", "modify"),
    "person": ("user", "individual", "human"),
    "plus": ("add", "create", "new"),
    "repo": ("repository", "code", "project"),
    "rocket": ("launch", "space", "fast"),
    "search": ("find", "look", "magnify"),
    "shield": ("security", "protection", "safe"),
    "star": ("favorite", "rating", "bookmark"),
    "sync": ("refresh", "update", "reload"),
    "tag": ("label", "category", "mark"),
    "terminal": ("console", "command", "cli"),
    "three-bars": ("menu", "hamburger", "navigation"),
    "trash": ("delete", "remove", "bin"),
    "upload": ("send", "export", "share"),
    "x": ("close", "cancel", "exit"),
    "zap": ("lightning", "fast", "energy"),
}

BUILTIN_LIBRARIES: tuple[LibraryDefinition, ...] = (
    LibraryDefinition(
        name="bootstrap-icons",
        display_name="Bootstrap Icons",
        version="1.11.3",
        description="Official open source SVG icon library for Bootstrap",
        source_url="https://github.com/twbs/icons",
        license="MIT",
        package="bootstrap-icons",
        icon_paths=("icons/*.svg",),
        styles=("regular", "fill"),
    ),
    LibraryDefinition(
        name="feather",
        display_name="Feather Icons",
        version="4.29.1",
        description="Simply beautiful open source icons",
        source_url="https://github.com/feathericons/feather",
        license="MIT",
        package="feather-icons",
        icon_paths=("dist/icons/*.svg",),
        styles=("outline",),
        extra_tags=("feather",),
    ),
    LibraryDefinition(
        name="octicons",
        display_name="Octicons",
        version="19.8.0",
        description="GitHub's icon library - a scalable set of icons handcrafted by GitHub.",
        source_url="https://github.com/primer/octicons",
        license="MIT",
        package="@primer/octicons",
        icon_paths=("build/svg/*.svg",),
        extra_tags=("octicon", "github", "primer"),
        synonyms=_OCTICONS_SYNONYMS,
    ),
    LibraryDefinition(
        name="tabler-icons",
        display_name="Tabler Icons",
        version="2.47.0",
        description=(
            "Free and open source icons designed to make your website or app attractive, "
            "visually consistent and simply beautiful."
        ),
        source_url="https://github.com/tabler/tabler-icons",
        license="MIT",
        package="@tabler/icons",
        icon_paths=("icons/*.svg",),
        extra_tags=("tabler", "outline", "stroke"),
    ),
)


def get_library_definition(name: str) -> LibraryDefinition | None:
    for definition in BUILTIN_LIBRARIES:
        if definition.name == name:
            return definition
    return None


def select_libraries(names: list[str] | None) -> list[LibraryDefinition]:
    """Return the built-in definitions named in ``names`` (all when empty), in the given order."""
    if not names:
        return list(BUILTIN_LIBRARIES)
    selected: list[LibraryDefinition] = []
    for name in names:
        definition = get_library_definition(name.strip())
        if definition is not None and definition not in selected:
            selected.append(definition)
    return selected
