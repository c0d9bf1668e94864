# coding=utf-8
from perf2profile.encoder.profile_encoder import encode_profile
