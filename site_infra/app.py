import aws_cdk as cdk
from aws_cdk import Environment
from site_infra.configs.logging_cfg import setup_logging
from site_infra.configs.site_cfg import get_cfg
from site_infra.stacks.site_stack import StaticSiteStack

setup_logging()

app = cdk.App()
cfg = get_cfg(app)

SITE_ENV = Environment(account=cfg.env.account_id, region=cfg.env.region)

StaticSiteStack(
    app,
    f"StaticSiteStack-{cfg.env.name}",
    env=SITE_ENV,
)

app.synth()
