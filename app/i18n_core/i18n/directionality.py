"""Text direction lookup for language codes."""

RTL_LANGUAGES = frozenset(
    [
        "ar", "shu", "sqr", "ssh", "xaa", "yhd", "yud", "aao", "abh", "abv", "acm",
        "acq", "acw", "acx", "acy", "adf", "ads", "aeb", "aec", "afb", "ajp", "apc",
        "apd", "arb", "arq", "ars", "ary", "arz", "auz", "avl", "ayh", "ayl", "ayn",
        "ayp", "bbz", "pga", "he", "iw", "ps", "pbt", "pbu", "pst", "prp", "prd",
        "ur", "ydd", "yds", "yih", "ji", "yi", "hbo", "men", "xmn", "fa", "jpr",
        "peo", "pes", "prs", "dv", "sam",
    ]
)


def text_direction(language_part: str) -> str:
    """Return "rtl" for right-to-left languages, "ltr" otherwise."""
    return "rtl" if language_part.lower() in RTL_LANGUAGES else "ltr"
