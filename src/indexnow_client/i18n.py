"""
Internationalization (i18n) module for the IndexNow client.

Provides translations for all user-facing CLI messages in English (en)
and Chinese (zh).
"""

from typing import Optional


# Supported languages
SUPPORTED_LANGUAGES = frozenset({"en", "zh"})
DEFAULT_LANGUAGE = "en"


# Translation dictionary with all messages
# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Generic
    "common.yes": {"en": "yes", "zh": "是"},
    "common.no": {"en": "no", "zh": "否"},
    "common.enabled": {"en": "enabled", "zh": "启用"},
    "common.disabled": {"en": "disabled", "zh": "禁用"},

    # CLI progress and errors
    "cli.cache_cleared": {
        "en": "Cache cleared",
        "zh": "已清理缓存",
    },
    "cli.submitting_url": {
        "en": "Submitting URL: {url}",
        "zh": "推送URL: {url}",
    },
    "cli.submitting_batch": {
        "en": "Submitting {count} URL(s)",
        "zh": "批量推送 {count} 个URL",
    },
    "cli.submitting_site": {
        "en": "Submitting site pages...",
        "zh": "推送站点重要页面...",
    },
    "cli.discovering": {
        "en": "Discovering pages...",
        "zh": "发现所有页面...",
    },
    "cli.dist_missing": {
        "en": "Build directory not found: {path}. Run the site build first.",
        "zh": "构建目录不存在: {path}，请先运行构建",
    },
    "cli.discovered": {
        "en": "Found {count} page(s):",
        "zh": "发现 {count} 个页面:",
    },
    "cli.discovered_source": {
        "en": "  - {source}: {count}",
        "zh": "  - {source}: {count} 个",
    },
    "cli.no_pages": {
        "en": "No pages to submit",
        "zh": "没有找到需要推送的页面",
    },
    "cli.invalid_config": {
        "en": "Error: invalid IndexNow configuration",
        "zh": "错误: IndexNow 配置无效",
    },
    "cli.failures_hint": {
        "en": "Some submissions failed; see the log above for details",
        "zh": "存在推送失败，请检查上方的详细错误信息",
    },
    "cli.cache_hint": {
        "en": "Use --stats to show cache statistics, --clear to clear the cache",
        "zh": "使用 --stats 查看缓存统计，--clear 清理缓存",
    },
    "cli.error": {
        "en": "Error: {error}",
        "zh": "错误: {error}",
    },

    # Submission summary
    "summary.title": {"en": "Submission result:", "zh": "推送结果:"},
    "summary.success": {"en": "Success", "zh": "成功"},
    "summary.total": {"en": "Total", "zh": "总数"},
    "summary.succeeded": {"en": "Succeeded", "zh": "成功"},
    "summary.failed": {"en": "Failed", "zh": "失败"},
    "summary.cached": {"en": "Cache hits", "zh": "缓存命中"},
    "summary.duration": {"en": "Duration", "zh": "耗时"},
    "summary.details": {"en": "Details:", "zh": "详细结果:"},

    # Cache command
    "cache.title": {"en": "Cache statistics:", "zh": "缓存统计:"},
    "cache.status": {"en": "  Status: {status}", "zh": "  状态: {status}"},
    "cache.size": {"en": "  Size: {size} URL(s)", "zh": "  大小: {size} 个URL"},

    # Config command
    "config.title": {"en": "IndexNow configuration:", "zh": "IndexNow 配置:"},
    "config.site_url": {"en": "  Site URL: {value}", "zh": "  站点URL: {value}"},
    "config.api_key": {"en": "  API key: {value}", "zh": "  API密钥: {value}"},
    "config.key_location": {"en": "  Key location: {value}", "zh": "  密钥位置: {value}"},
    "config.endpoints": {"en": "  Endpoints: {value}", "zh": "  端点数量: {value}"},
    "config.max_retries": {"en": "  Max retries: {value}", "zh": "  最大重试: {value}"},
    "config.batch_size": {"en": "  Batch size: {value}", "zh": "  批次大小: {value}"},
    "config.cache": {"en": "  Cache: {value}", "zh": "  缓存状态: {value}"},
    "config.valid": {"en": "  Valid: {value}", "zh": "  配置有效: {value}"},

    # Test command
    "test.title": {
        "en": "Testing IndexNow endpoint connectivity...",
        "zh": "测试IndexNow端点连接...",
    },

    # Post-build push
    "postbuild.skipped": {
        "en": "Not a production build, skipping (use --force to submit, --dry-run to preview)",
        "zh": "非生产环境，跳过推送（使用 --force 参数强制推送，--dry-run 查看将推送的URL）",
    },
    "postbuild.force": {"en": "Forced submission mode", "zh": "强制推送模式"},
    "postbuild.dry_run": {
        "en": "Dry run: listing URLs without submitting",
        "zh": "干运行模式 - 仅显示将推送的URL，不实际推送",
    },
    "postbuild.unique": {
        "en": "{count} unique URL(s) after merging",
        "zh": "合并去重后共 {count} 个唯一URL",
    },
    "postbuild.preview": {"en": "URLs to submit:", "zh": "将推送以下URL:"},
    "postbuild.more": {"en": "  ... and {count} more", "zh": "  ... 还有 {count} 个URL"},
    "postbuild.dry_run_done": {
        "en": "Dry run complete, nothing submitted",
        "zh": "干运行完成，未实际推送",
    },
    "postbuild.cache_size": {
        "en": "Cache now holds {size} URL(s)",
        "zh": "缓存统计: {size} 个URL已缓存",
    },
    "postbuild.done": {"en": "Submission finished", "zh": "推送任务完成"},
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'summary.total')
        language: Language code ('en' or 'zh'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string.
        If the key is not found, returns the key itself.
        If the language is not found, falls back to DEFAULT_LANGUAGE.

    Examples:
        >>> get_message('summary.total', 'en')
        'Total'
        >>> get_message('cli.submitting_url', 'zh', url='https://example.com/')
        '推送URL: https://example.com/'
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language) or translations.get(DEFAULT_LANGUAGE)
    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            # If formatting fails, return the unformatted message
            pass

    return message


def get_missing_translations(language: str) -> set[str]:
    """Message keys that have no translation for a language."""
    return {key for key, translations in TRANSLATIONS.items() if language not in translations}


def validate_translations() -> dict[str, set[str]]:
    """
    Validate that all languages have all translations.

    Returns:
        Dictionary mapping language codes to sets of missing message keys.
        Empty sets indicate complete translations.
    """
    return {language: get_missing_translations(language) for language in SUPPORTED_LANGUAGES}
