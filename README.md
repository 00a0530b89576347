# sfont

Building blocks for working with SoundFont 2 files in Python: readers for
the RIFF list chunks of an `.sf2` file, the unit conversions SoundFont
synthesis relies on, a volume envelope, and the voice-management and mixing
core of a polyphonic synthesizer. It has no dependencies outside the
standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Reading SoundFont chunks

Every reader takes a binary stream (anything with `read(size)`) positioned
at the start of a `LIST` chunk. Malformed or truncated data raises
`sfont.chunks.SoundFontError`.

```python
from sfont.info import read_info
from sfont.sample_data import read_sample_data

with open("piano.sf2", "rb") as stream:
    stream.read(12)                    # skip the RIFF header
    info = read_info(stream)           # the INFO list
    samples = read_sample_data(stream) # the sdta list

print(info.bank_name, info.version.major, info.version.minor)
print(samples.bits_per_sample, len(samples.wave_data))
```

- `sfont.info.read_info` returns a frozen `SoundFontInfo` dataclass
  (`version`, `target_sound_engine`, `bank_name`, `rom_name`, `rom_version`,
  `creation_date`, `author`, `target_product`, `copyright`, `comments`,
  `tools`). Entries absent from the file keep empty defaults; an unknown
  sub-chunk ID is an error.
- `sfont.sample_data.read_sample_data` returns a `SoundFontSampleData` whose
  `wave_data` is an `array("h")` of the 16-bit samples. `sm24` data is
  skipped, and Ogg-compressed sample data (SoundFont 3) is rejected.
- `sfont.version.read_version` reads a `SoundFontVersion(major, minor)`.
- `sfont.zones.read_zone_infos` reads a `pbag`/`ibag` chunk into `ZoneInfo`
  records, and `create_zones` groups generators into `Zone` objects,
  dropping the terminating record.
- `sfont.parameters.read_parameters(stream, codec)` reads the `pdta` list.
  The preset, instrument, generator and sample-header records are decoded by
  the callables of a `ParameterCodec` you supply, which also build the final
  instruments and presets; the result is a `SoundFontParameters` with
  `sample_headers`, `presets` and `instruments`. Modulator chunks are
  skipped, and each of the seven required sub-chunks must be present.

`sfont.chunks` holds the primitives these are built on: `read_four_cc`,
`read_i16`, `read_u16`, `read_i32`, `read_fixed_length_string`,
`discard_data`, `CountingReader` and `iter_subchunks`.

## Conversions

`sfont.sfmath` provides `clamp`, `timecents_to_seconds`, `cents_to_hertz`,
`cents_to_multiplying_factor`, `decibels_to_linear`, `linear_to_decibels`,
`key_number_to_multiplying_factor` and `exp_cutoff`.

## Synthesizer settings

```python
from sfont.settings import SynthesizerSettings

settings = SynthesizerSettings(44100)
settings.block_size = 128
settings.validate()
```

The sample rate must lie between 16000 and 192000, the block size between 8
and 1024 and the maximum polyphony between 8 and 256; anything else raises
`SynthesizerSettingsError` (a `ValueError`). The defaults are a block size
of 64, a polyphony of 64, and reverb and chorus enabled.

## Volume envelope

`sfont.volume_envelope.VolumeEnvelope` runs the delay, attack, hold, decay,
sustain and release stages of a note:

```python
from sfont.settings import SynthesizerSettings
from sfont.volume_envelope import VolumeEnvelope

envelope = VolumeEnvelope(SynthesizerSettings(44100))
envelope.start(delay=0.0, attack=0.01, hold=0.0, decay=1.0, sustain=0.5, release=0.3)
while envelope.process(64):
    ...                       # envelope.value, envelope.stage, envelope.priority
```

`process` returns `False` once the envelope has become inaudible.

## Synthesizer core

`sfont.synthesizer.Synthesizer` keeps the preset lookup (with fallback to the
GM set and then to the preset with the lowest bank/patch number), sixteen
channels with channel 9 as percussion, a `VoiceCollection` with voice
stealing and exclusive classes, and the block mixer with gain smoothing and
chorus and reverb sends. It is driven with `note_on`, `note_off`,
`note_off_all`, `note_off_all_channel`, `process_midi_message`,
`reset_all_controllers`, `reset_all_controllers_channel` and `reset`, and
`render(length)` returns two lists holding the next `length` samples of the
left and right channels. `master_volume` starts at 0.5.

The synthesizer is assembled from collaborators passed to its constructor:

```python
synth = Synthesizer(
    sound_font,                 # .presets, .instruments, .wave_data
    settings,
    create_channel=make_channel,                    # (is_percussion) -> channel
    create_voice_components=make_components,        # (settings) -> VoiceComponents
    create_region_pair=make_region_pair,            # (preset_region, instrument_region)
    create_reverb=make_reverb,                      # (sample_rate)
    create_chorus=make_chorus,                      # (sample_rate, delay, depth, frequency)
)
synth.note_on(0, 60, 100)
left, right = synth.render(44100)
synth.note_off(0, 60)
```

`create_reverb` and `create_chorus` are required when
`settings.enable_reverb_and_chorus` is true; otherwise a `ValueError` is
raised. The attributes and methods each collaborator must offer are listed
in the docstrings of `Synthesizer`, `Effects`, `VoiceComponents` and
`Voice.process`.

## What this package does not do

- It does not open a whole `.sf2` file: there is no reader for the outer
  RIFF header, and no decoder for preset headers, instrument headers,
  generators or sample headers; `read_parameters` relies on the
  `ParameterCodec` you give it for these.
- It has no MIDI channel state, oscillator, low-pass filter, LFOs,
  modulation envelope, region parameter model, reverb or chorus. The
  synthesizer only produces sound once these are supplied through its
  constructor.
- It has no command-line program, MIDI file player, or audio output; rendered
  samples are returned as Python lists.