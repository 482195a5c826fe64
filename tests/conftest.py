from tests.utils.fixtures import aws_environ, gen_table, chalice_client  # noqa: F401
