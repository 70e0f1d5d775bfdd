# This file is part of oci-vnic. See LICENSE file for license information.

# Set and read for determining the oci-vnic config file location
CFG_ENV_NAME = "OCI_VNIC_CFG"

# This is expected to be a yaml formatted file
VNIC_CONFIG = "/etc/oci-vnic/oci-vnic.cfg"

METADATA_VNICS_ENDPOINT = "http://169.254.169.254/opc/v2/vnics/"
# Static token required by the v2 instance metadata protocol
METADATA_HEADERS = {"Authorization": "Bearer Oracle"}

METADATA_SERVICE_READY_TIMEOUT = 30
VNIC_ATTACHMENT_READY_TIMEOUT = 30

PROFILE_TEMPLATE_PATH = "/etc/oci-vnic/profile.tpl"
PROFILE_DIR = "/etc/sysconfig/network-scripts"
PROFILE_PREFIX = "ifcfg-"

# What u get if no config is provided
CFG_BUILTIN = {
    "metadata_url": METADATA_VNICS_ENDPOINT,
    "metadata_headers": METADATA_HEADERS,
    "url_timeout": 5,
    "metadata_service_ready_timeout": METADATA_SERVICE_READY_TIMEOUT,
    "vnic_attachment_ready_timeout": VNIC_ATTACHMENT_READY_TIMEOUT,
    "mac_source": "ip",
    "template_path": PROFILE_TEMPLATE_PATH,
    "profile_dir": PROFILE_DIR,
    "profile_mode": 0o644,
    "log_cfgs": [],
    "log_level": "INFO",
}
