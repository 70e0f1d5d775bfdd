# This file is part of oci-vnic. See LICENSE file for license information.
