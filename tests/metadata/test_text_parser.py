from cgs_backend.features.geninfo.loras import LoraEntry
from cgs_backend.features.geninfo.text_parser import (
    is_parameter_line,
    looks_like_parameters_text,
    parse_lora_list,
    parse_parameters_mapping,
    parse_parameters_text,
)


def test_basic_parameter_block():
    text = (
        "best quality\n"
        "Negative prompt: blurry, low res\n"
        "Steps: 30, Sampler: Euler a, CFG scale: 7, Seed: 123, Size: 512x768"
    )
    params = parse_parameters_text(text)
    assert params.prompt == "best quality"
    assert params.negative_prompt == "blurry, low res"
    assert params.steps == 30
    assert params.sampler == "Euler a"
    assert params.cfg == 7.0
    assert params.seed == 123
    assert params.width == 512
    assert params.height == 768
    assert params.loras == []


def test_multiline_prompt_and_negative_continuation():
    text = (
        "a portrait,\n"
        "soft light\n"
        "Negative prompt: ugly,\n"
        "deformed hands\n"
        "Steps: 20, Schedule type: Karras, Model: juggernautXL, Version: v2.5.0"
    )
    params = parse_parameters_text(text)
    assert params.prompt == "a portrait,\nsoft light"
    assert params.negative_prompt == "ugly, deformed hands"
    assert params.scheduler == "Karras"
    assert params.model == "juggernautXL"
    assert params.version == "v2.5.0"


def test_quoted_values_keep_commas():
    text = 'a tree\nSteps: 10, Sampler: "DPM++ 2M, Karras", Seed: 5'
    params = parse_parameters_text(text)
    assert params.sampler == "DPM++ 2M, Karras"
    assert params.seed == 5


def test_inline_lora_tags_are_extracted():
    params = parse_parameters_text("a castle <lora:myLora:0.8>, night\nSteps: 12")
    assert params.prompt == "a castle, night"
    assert params.loras == [LoraEntry(name="myLora", strength_model=0.8)]


def test_inline_lora_without_weight_defaults_to_one():
    params = parse_parameters_text("<lora:folder/styleA.safetensors> sunset")
    assert params.prompt == "sunset"
    assert params.loras == [LoraEntry(name="styleA", strength_model=1.0)]


def test_scaffolding_tokens_are_stripped():
    assert parse_parameters_text("a cat, ADDROW, a dog").prompt == "a cat, a dog"
    assert parse_parameters_text("sky ADDBASE, sea addcol ground").prompt == "sky, sea ground"
    assert parse_parameters_text("a cat ADDCOL a dog").prompt == "a cat a dog"


def test_parameter_loras_merge_with_inline_tags():
    text = 'hero <lora:b:0.2>\nSteps: 5, LoRAs: "a:0.5, b (0.9), c"'
    params = parse_parameters_text(text)
    assert params.loras == [
        LoraEntry(name="a", strength_model=0.5),
        LoraEntry(name="b", strength_model=0.2),
        LoraEntry(name="c", strength_model=1.0),
    ]


def test_unknown_keys_are_ignored():
    params = parse_parameters_text("x\nSteps: 9, Denoising strength: 0.4, Hires upscale: 2")
    assert params.steps == 9
    assert params.prompt == "x"


def test_parse_lora_list_formats():
    assert parse_lora_list("a (0.5), b:0.25, sub/c.safetensors, ") == [
        LoraEntry("a", 0.5),
        LoraEntry("b", 0.25),
        LoraEntry("c", 1.0),
    ]


def test_parameter_line_detection():
    assert is_parameter_line("Steps: 20, Sampler: Euler")
    assert is_parameter_line("cfg scale: 7")
    assert is_parameter_line("Lora hashes: abc")
    assert not is_parameter_line("a photo of steps: not really")
    assert looks_like_parameters_text("Fooocus v2")
    assert looks_like_parameters_text("x\nNegative prompt: y")
    assert not looks_like_parameters_text("just a caption")
    assert not looks_like_parameters_text("")


def test_json_parameters_mapping():
    data = {
        "prompt": "a knight",
        "negativePrompt": "blurry",
        "base_model": "juggernautXL_v8",
        "steps": 30,
        "guidance_scale": 4.0,
        "seed": "1234",
        "sampler": "dpmpp_2m_sde_gpu",
        "scheduler": "karras",
        "resolution": "(1152, 896)",
        "version": "Fooocus v2.5.0",
        "styles": ["Fooocus V2", "Fooocus Enhance"],
        "loras": [{"name": "detail.safetensors", "weight": 0.5}, {"name": ""}],
        "lora1": "sharp.safetensors",
        "lora1_weight": 0.25,
        "lora2": "soft",
    }
    params = parse_parameters_mapping(data)
    assert params.prompt == "a knight"
    assert params.negative_prompt == "blurry"
    assert params.model == "juggernautXL_v8"
    assert params.steps == 30
    assert params.cfg == 4.0
    assert params.seed == 1234
    assert (params.width, params.height) == (1152, 896)
    assert params.styles == ["Fooocus V2", "Fooocus Enhance"]
    assert params.loras == [
        LoraEntry("detail", 0.5),
        LoraEntry("sharp", 0.25),
        LoraEntry("soft", 1.0),
    ]
