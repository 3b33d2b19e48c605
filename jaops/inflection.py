"""
    Conversion of url resource segments to resource type names:
    "blog-posts" => "blog-post" => "blogPost"
"""
import re
from functools import lru_cache
import inflect

_engine = inflect.engine()
_WORD_SEPARATOR = re.compile(r"[-_\s]+")


@lru_cache(maxsize=256)
def singularize(word: str) -> str:
    """
    :param word: plural (or already singular) noun, the last word is singularized
    :return: singular noun
    """
    if not word:
        return word
    parts = _WORD_SEPARATOR.split(word)
    if not parts[-1]:
        return word
    singular = _engine.singular_noun(parts[-1])
    if singular:
        return word[: len(word) - len(parts[-1])] + singular
    return word


def camelize(word: str) -> str:
    """
    :param word: dasherized, underscored or class name
    :return: lower camel-cased name, eg. BlogPost, blog_post and blog-post => blogPost
    """
    parts = [part for part in _WORD_SEPARATOR.split(word) if part]
    if not parts:
        return ""
    head, tail = parts[0], parts[1:]
    return head[:1].lower() + head[1:] + "".join(part[:1].upper() + part[1:] for part in tail)


def resource_type(segment: str) -> str:
    """
    :param segment: the resource segment of the request url
    :return: the type name the resources are registered under
    """
    return camelize(singularize(segment))
