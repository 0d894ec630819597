import os
import tempfile
import unittest

from operatorhub.config import load_config
from operatorhub.errors import ConfigError

import sample_manifests as m


class LoadConfigTest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, content):
        path = os.path.join(self.tmp.name, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_load(self):
        conf = load_config(self.write(m.CONFIG))

        self.assertEqual(conf.new_version, "2.10.0")
        self.assertEqual(conf.prev_version, "2.9.0")
        self.assertEqual(conf.stack_version, "8.11.0")
        self.assertEqual(len(conf.crds), 3)
        self.assertEqual(conf.crds[0].name, "kibanas.kibana.k8s.elastic.co")
        self.assertEqual(conf.crds[0].display_name, "Kibana")
        self.assertEqual(conf.crds[0].description, "Kibana instance")

        community, certified = conf.packages
        self.assertEqual(community.output_path, "community-operators")
        self.assertEqual(community.package_name, "elastic-cloud-eck")
        self.assertEqual(community.distribution_channel, "operatorhub")
        self.assertFalse(community.ubi_only)
        self.assertFalse(community.digest_pinning)
        self.assertTrue(certified.ubi_only)
        self.assertTrue(certified.digest_pinning)

    def test_has_digest_pinning(self):
        self.assertTrue(load_config(self.write(m.CONFIG)).has_digest_pinning())
        self.assertFalse(load_config(self.write("newVersion: 1.0.0\npackages:\n- packageName: p\n")).has_digest_pinning())

    def test_empty_file(self):
        conf = load_config(self.write(""))
        self.assertEqual(conf.new_version, "")
        self.assertEqual(conf.packages, [])

    def test_missing_file(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config(os.path.join(self.tmp.name, "nope.yaml"))
        self.assertIn("failed to open file", str(ctx.exception))

    def test_malformed_yaml(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config(self.write("newVersion: [1.0\n"))
        self.assertIn("failed to unmarshal config", str(ctx.exception))

    def test_not_a_mapping(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("- a\n- b\n"))

    def test_bad_crd_list(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("crds: nope\n"))

    def test_unquoted_version_is_rejected(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config(self.write("newVersion: 2.10\nstackVersion: 8.10\n"))
        self.assertIn("failed to unmarshal config", str(ctx.exception))
        self.assertIn("newVersion", str(ctx.exception))

    def test_quoted_version_is_kept(self):
        conf = load_config(self.write("newVersion: '2.10'\nstackVersion: \"8.10\"\n"))
        self.assertEqual(conf.new_version, "2.10")
        self.assertEqual(conf.stack_version, "8.10")

    def test_string_flag_is_rejected(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config(self.write("packages:\n- packageName: p\n  ubiOnly: \"false\"\n"))
        self.assertIn("ubiOnly", str(ctx.exception))

        with self.assertRaises(ConfigError) as ctx:
            load_config(self.write("packages:\n- packageName: p\n  digestPinning: \"false\"\n"))
        self.assertIn("digestPinning", str(ctx.exception))

    def test_non_ascii_description(self):
        conf = load_config(self.write(
            "crds:\n- name: kibanas.kibana.k8s.elastic.co\n  displayName: Kibana\n  description: Kibana – visualisation\n"
        ))
        self.assertEqual(conf.crds[0].description, "Kibana – visualisation")
