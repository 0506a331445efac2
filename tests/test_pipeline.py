# tests/test_pipeline.py

from regionalise.config import unit_config_from_dict
from regionalise.pipeline import Converter, build_converter, convert_to_regional


CONVERTER = Converter()


def test_noun_license_converted():
    assert CONVERTER.convert_to_regional("I need a license to drive") == "I need a licence to drive"


def test_verb_license_unchanged():
    text = "We will license our software"
    assert CONVERTER.convert_to_regional(text) == text


def test_feet_converted_in_sentence():
    text = "The room is 12 feet wide"
    spans = CONVERTER.detect_unit_spans(text)
    assert (spans[0].value, spans[0].unit, spans[0].unit_type.value) == (12, "feet", "length")
    assert CONVERTER.convert_to_regional(text) == "The room is 3.7 metres wide"


def test_only_comments_inside_fences_convert():
    text = "```go\n// color\nfunc f(){}\n```"
    assert CONVERTER.convert_to_regional(text) == "```go\n// colour\nfunc f(){}\n```"


def test_ignore_marker_skips_next_line():
    text = "// m2e-ignore\nThis has color.\nThis has color too."
    assert CONVERTER.convert_to_regional(text) == "// m2e-ignore\nThis has color.\nThis has colour too."


def test_open_source_license_names_untouched():
    text = "This is under MIT license"
    assert CONVERTER.convert_to_regional(text) == text


def test_ignore_directives_can_be_disregarded():
    text = "// m2e-ignore\nThis has color."
    assert CONVERTER.convert_ignoring_directives(text) == "// m2e-ignore\nThis has colour."


def test_file_marker_returns_input():
    text = "# m2e-ignore-file\nThe color is 5 feet."
    assert CONVERTER.convert_to_regional(text) == text


def test_mixed_document():
    text = (
        "The **neighborhood center** is 6 miles away; see [the color guide](https://example.com/color).\n"
        "Run `colorize --center` first.\n"
        "Install a 6-foot fence at 75°F."
    )
    assert CONVERTER.convert_to_regional(text) == (
        "The **neighbourhood centre** is 9.7 km away; see [the colour guide](https://example.com/color).\n"
        "Run `colorize --center` first.\n"
        "Install a 1.8-metre fence at 24°C."
    )


def test_smart_quotes_normalised_on_request():
    text = "She said “color” — twice"
    assert CONVERTER.convert_plain(text, normalise_smart_quotes=True) == 'She said "colour" - twice'
    assert CONVERTER.convert_plain(text) == "She said “colour” — twice"


def test_urls_are_left_alone():
    text = "Visit https://example.com/5-feet/color today"
    assert CONVERTER.convert_plain(text) == text


def test_idempotent_on_british_text():
    text = (
        "The neighbour's favourite colour is grey. Her medical licence allows her to practise. "
        "The room is 3.7 metres wide and the oven runs at 177°C."
    )
    assert CONVERTER.convert_to_regional(text) == text


def test_converting_twice_changes_nothing_more():
    text = "My favorite color is gray and the box weighs 5 pounds."
    once = CONVERTER.convert_to_regional(text)
    assert CONVERTER.convert_to_regional(once) == once


def test_contextual_verdict_blocks_dictionary_forms():
    assert CONVERTER.convert_plain("She practices law") == "She practises law"
    assert CONVERTER.convert_plain("They practiced daily") == "They practised daily"


def test_collect_spans_sources():
    spans = CONVERTER.collect_spans("I need a license for my 5 pound color printer")
    assert {s.source for s in spans} == {"units", "words", "dictionary"}


def test_build_converter_with_configs():
    converter = build_converter(
        unit_config_path="configs/unit_config.yaml",
        word_config_path="configs/word_config.yaml",
        dictionary_path="configs/user_dictionary.yaml",
    )
    assert converter.convert_plain("a tidbit of color") == "a titbit of colour"


def test_module_level_helper():
    assert convert_to_regional("gray") == "grey"


def test_placeholder_lookalikes_in_prose():
    text = "see XMDFMTX7XMDFMTX and **color**"
    assert CONVERTER.convert_to_regional(text) == "see XMDFMTX7XMDFMTX and **colour**"


def test_tilde_fence_converts_comments_only():
    text = "~~~python\n# color\nx = 1\n~~~\nMore color."
    assert CONVERTER.convert_to_regional(text) == "~~~python\n# colour\nx = 1\n~~~\nMore colour."


def test_fenced_block_without_comments_is_byte_identical():
    text = "Intro.\n```python\ndef color():\n    return 'gray'  \n```\n"
    assert CONVERTER.convert_to_regional(text) == text


def test_ignore_marker_inside_fenced_comment():
    text = "```js\n// m2e-ignore\n// color\nlet a = 1; // color\n```"
    assert CONVERTER.convert_to_regional(text) == (
        "```js\n// m2e-ignore\n// color\nlet a = 1; // colour\n```"
    )


def test_raw_code_detection_is_opt_in():
    text = "#!/usr/bin/env python\n# pick a color\nprint('color')\n"
    assert CONVERTER.convert_to_regional(text) == (
        "#!/usr/bin/env python\n# pick a colour\nprint('colour')\n"
    )
    sniffing = Converter(detect_raw_code=True)
    assert sniffing.convert_to_regional(text) == (
        "#!/usr/bin/env python\n# pick a colour\nprint('color')\n"
    )
    assert sniffing.convert_to_regional("The room is 12 feet wide") == "The room is 3.7 metres wide"


def test_written_and_height_measurements():
    assert CONVERTER.convert_plain("The fence is twenty five feet long") == "The fence is 7.6 metres long"
    assert CONVERTER.convert_plain("She is 5 ft. 6 in. tall") == "She is 1.7 metres tall"
    assert CONVERTER.convert_plain("He is 6 ft 2 in.") == "He is 1.9 metres."


def test_report_spans_match_applied_replacements():
    text = "Use `color` and gray.\n# m2e-ignore-next\nThe color is 5 feet."
    spans = CONVERTER.report_spans(text)
    assert [(text[s.start:s.end], s.replacement) for s in spans] == [("gray", "grey")]

    spans = CONVERTER.report_spans(text, ignore_directives=False)
    assert [text[s.start:s.end] for s in spans] == ["gray", "color", "5 feet"]

    assert CONVERTER.report_spans("# m2e-ignore-file\ncolor") == []


def test_sentence_boundaries_limit_context():
    text = (
        "The software license is new. "
        "Next year you need a license for each seat, so plan ahead and budget well."
    )
    assert CONVERTER.convert_plain(text) == text
    assert CONVERTER.convert_by_sentence(text) == text.replace("need a license", "need a licence")

    spans = CONVERTER.sentence_spans(text)
    assert [(s.start, s.replacement) for s in spans] == [(text.index("license", 30), "licence")]

    short = "I need a license to drive"
    assert CONVERTER.convert_by_sentence(short) == CONVERTER.convert_plain(short)


def test_with_config_keeps_user_dictionary():
    converter = Converter(user_dictionary={"tidbit": "titbit"})
    mass_only = converter.with_config(unit_config=unit_config_from_dict({"enabled_unit_types": ["mass"]}))
    assert mass_only.convert_plain("a tidbit 12 feet from 5 pounds") == "a titbit 12 feet from 2.3 kg"
